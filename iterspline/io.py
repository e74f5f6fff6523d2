"""
JSON representation of joint groups and trajectories.

Layout::

    {
      "group": {"name": "arm", "joints": [{"name": "j1", "max_velocity": 1.0, ...}]},
      "waypoints": [{"positions": [...], "velocities": [...],
                     "accelerations": [...], "duration_from_previous": 0.0}]
    }

Joint entries accept every ``VariableBounds`` field; a ``max_*`` value given
without its ``*_bounded`` flag marks that quantity as bounded.
"""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

from iterspline.robot.model import JointModelGroup, VariableBounds
from iterspline.robot.trajectory import RobotTrajectory, Waypoint

_BOUND_FLAGS = {
    "max_velocity": "velocity_bounded",
    "max_acceleration": "acceleration_bounded",
    "max_jerk": "jerk_bounded",
}


def group_from_dict(data: dict[str, Any]) -> JointModelGroup:
    known = {f.name for f in fields(VariableBounds)}
    names: list[str] = []
    bounds: dict[str, VariableBounds] = {}
    for entry in data.get("joints", []):
        entry = dict(entry)
        name = str(entry.pop("name"))
        unknown = set(entry) - known
        if unknown:
            raise ValueError(f"unknown bound fields for joint '{name}': {sorted(unknown)}")
        for limit, flag in _BOUND_FLAGS.items():
            if limit in entry and flag not in entry:
                entry[flag] = True
        names.append(name)
        bounds[name] = VariableBounds(**entry)
    return JointModelGroup(name=str(data.get("name", "")), variable_names=names, bounds=bounds)


def group_to_dict(group: JointModelGroup) -> dict[str, Any]:
    joints = []
    for name in group.variable_names:
        entry = {"name": name}
        entry.update(asdict(group.get_variable_bounds(name)))
        joints.append(entry)
    return {"name": group.name, "joints": joints}


def trajectory_from_dict(data: dict[str, Any]) -> RobotTrajectory:
    group = group_from_dict(data["group"]) if data.get("group") is not None else None
    waypoints = [
        Waypoint(
            positions=wp["positions"],
            velocities=wp.get("velocities"),
            accelerations=wp.get("accelerations"),
            duration_from_previous=wp.get("duration_from_previous", 0.0),
        )
        for wp in data.get("waypoints", [])
    ]
    return RobotTrajectory(group, waypoints)


def trajectory_to_dict(trajectory: RobotTrajectory) -> dict[str, Any]:
    return {
        "group": group_to_dict(trajectory.group) if trajectory.group is not None else None,
        "waypoints": [
            {
                "positions": wp.positions.tolist(),
                "velocities": wp.velocities.tolist(),
                "accelerations": wp.accelerations.tolist(),
                "duration_from_previous": wp.duration_from_previous,
            }
            for wp in trajectory.waypoints
        ],
    }


def load_trajectory(path: str | Path) -> RobotTrajectory:
    with open(path, encoding="utf-8") as f:
        return trajectory_from_dict(json.load(f))


def dump_trajectory(trajectory: RobotTrajectory, path: str | Path, **extra: Any) -> None:
    """Write ``trajectory`` as JSON; ``extra`` keys are added at top level."""
    data = trajectory_to_dict(trajectory)
    data.update(extra)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
