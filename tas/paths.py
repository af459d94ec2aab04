"""Resolve whether a command runs from inside a project or from the root.

A project directory is marked by project.json and always sits two levels
below the root: <root>/<projects dir>/<project>.  Anything else is taken to
be the root itself.  The result is resolved once at the top of a command and
passed down explicitly.
"""

import os
from dataclasses import dataclass
from typing import Optional

from tas.config import PROJECT_FILE_NAME
from tas.errors import PathResolutionError


@dataclass(frozen=True)
class ProjectContext:
    cwd: str
    root_dir: str
    project_dir: Optional[str] = None

    @property
    def in_project(self) -> bool:
        return self.project_dir is not None


def is_project_dir(path: str) -> bool:
    return os.path.isfile(os.path.join(path, PROJECT_FILE_NAME))


def resolve_context(cwd: Optional[str] = None) -> ProjectContext:
    if cwd is None:
        try:
            cwd = os.getcwd()
        except OSError as e:
            raise PathResolutionError("failed to get current directory") from e
    cwd = os.path.abspath(cwd)
    if not os.path.isdir(cwd):
        raise PathResolutionError(f"not a directory: {cwd}")

    if not is_project_dir(cwd):
        return ProjectContext(cwd=cwd, root_dir=cwd)

    projects_dir = os.path.dirname(cwd)
    root_dir = os.path.dirname(projects_dir)
    if projects_dir == cwd or root_dir == projects_dir:
        raise PathResolutionError(f"project dir has no root two levels up: {cwd}")
    return ProjectContext(cwd=cwd, root_dir=root_dir, project_dir=cwd)
