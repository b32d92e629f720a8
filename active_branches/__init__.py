"""active-git-branches - rank the active branches of a remote git repository."""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("active-git-branches")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for editable installs / dev
