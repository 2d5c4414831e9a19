"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    db_url:        str = "sqlite:///mipsync.db"
    repo_path:     str = Field(default="mips",   description="Local working tree of the proposals repository")
    clone_url:     Optional[str] = Field(default="https://github.com/makerdao/mips.git",
                                         description="Cloned into repo_path when the working tree is missing")
    remote:        str = Field(default="origin", description="Remote pulled on every sync")
    branch:        str = Field(default="master", description="Branch pulled on every sync")
    file_pattern:  str = Field(default=r"MIP\d+.*\.md$", description="Regex selecting tracked markdown files")
    subproposal_pattern: str = Field(default=r"^(?P<father>MIP\d+)c\d+-SP\d+",
                                     description="Regex with a 'father' group matched against subproposal names")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    github_url:    str = Field(default="https://api.github.com/graphql", description="GraphQL endpoint")
    github_owner:  str = "makerdao"
    github_repo:   str = "mips"
    github_token:  Optional[str] = Field(default=None, description="Bearer token for the GraphQL API")
    page_size:     int = Field(default=100, ge=1, le=100, description="Discussion records per page")
    http_timeout:  float = Field(default=30.0, gt=0, description="GraphQL request timeout in seconds")
    log_file:      Optional[str] = Field(default=None, description="Optional log file sink")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MIPSYNC_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MIPSYNC_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
