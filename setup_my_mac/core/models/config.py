"""
Configuration models — the desired state of the machine.

Loaded from config.toml (or a YAML equivalent). Sections map 1:1 to
steps: ``system`` → System, ``homebrew`` → Homebrew, and the three
``user`` blocks → Dotfiles, SSH and Git.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── System ──────────────────────────────────────────────────────


class TrackpadConfig(BaseModel):
    """Trackpad preferences; unset means leave the current value alone."""

    clicking: bool | None = None
    three_finger_drag: bool | None = None


class SystemConfig(BaseModel):
    """Machine identity and system-level preferences."""

    home_directory: str
    primary_user: str
    timezone: str | None = None
    touch_id_sudo: bool = False
    trackpad: TrackpadConfig = Field(default_factory=TrackpadConfig)

    def has_tasks(self) -> bool:
        """Whether the System step has anything to apply."""
        return (
            self.timezone is not None
            or self.touch_id_sudo
            or self.trackpad.clicking is not None
            or self.trackpad.three_finger_drag is not None
        )


# ── Homebrew ────────────────────────────────────────────────────


class HomebrewConfig(BaseModel):
    """Package manager integration: formulas and casks to install."""

    enable: bool = False
    brews: list[str] = Field(default_factory=list)
    casks: list[str] = Field(default_factory=list)


# ── User ────────────────────────────────────────────────────────


class SshConfig(BaseModel):
    """Raw contents for ~/.ssh/config."""

    config: str


class DotfileEntry(BaseModel):
    """A source → target copy pair. Relative sources resolve against the config dir."""

    source: str
    target: str


class GitInit(BaseModel):
    default_branch: str | None = None


class GitMerge(BaseModel):
    conflictstyle: str | None = None


class GitPull(BaseModel):
    rebase: bool | None = None


class GitPush(BaseModel):
    auto_setup_remote: bool | None = None


class GitConfig(BaseModel):
    """Global git preferences."""

    enable: bool = False
    user_email: str | None = None
    user_name: str | None = None
    credential_helper: str | None = None
    ignores: list[str] = Field(default_factory=list)
    init: GitInit | None = None
    merge: GitMerge | None = None
    pull: GitPull | None = None
    push: GitPush | None = None

    def settings(self) -> list[tuple[str, str]]:
        """``git config --global`` key/value pairs, in application order."""
        pairs: list[tuple[str, str]] = []
        if self.user_name is not None:
            pairs.append(("user.name", self.user_name))
        if self.user_email is not None:
            pairs.append(("user.email", self.user_email))
        if self.credential_helper is not None:
            pairs.append(("credential.helper", self.credential_helper))
        if self.init and self.init.default_branch is not None:
            pairs.append(("init.defaultBranch", self.init.default_branch))
        if self.merge and self.merge.conflictstyle is not None:
            pairs.append(("merge.conflictStyle", self.merge.conflictstyle))
        if self.pull and self.pull.rebase is not None:
            pairs.append(("pull.rebase", _git_bool(self.pull.rebase)))
        if self.push and self.push.auto_setup_remote is not None:
            pairs.append(("push.autoSetupRemote", _git_bool(self.push.auto_setup_remote)))
        return pairs

    def has_work(self) -> bool:
        """Whether any preference is actually set."""
        return bool(self.settings()) or bool(self.ignores)


class UserConfig(BaseModel):
    """Per-user files and tool preferences."""

    ssh: SshConfig | None = None
    dotfiles: dict[str, DotfileEntry] = Field(default_factory=dict)
    git: GitConfig | None = None


# ── Root ────────────────────────────────────────────────────────


class Config(BaseModel):
    """Root configuration document."""

    system: SystemConfig
    homebrew: HomebrewConfig = Field(default_factory=HomebrewConfig)
    user: UserConfig

    @property
    def git_enabled(self) -> bool:
        return self.user.git is not None and self.user.git.enable


def _git_bool(value: bool) -> str:
    return "true" if value else "false"
