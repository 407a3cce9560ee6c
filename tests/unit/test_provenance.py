
import subprocess

import pytest

from packages.schema.errors import ProvenanceError
from packages.vcs import provenance
from packages.vcs.provenance import DETACHED_HEAD, discover_provenance, git_remote_to_public_url


@pytest.mark.parametrize(
    "remote, url",
    [
        ("git@github.com:example/app.git", "https://github.com/example/app"),
        ("github.com:example/app.git", "https://github.com/example/app"),
        ("https://github.com/example/app.git", "https://github.com/example/app"),
        ("http://gitlab.example.test/group/sub/app.git", "https://gitlab.example.test/group/sub/app"),
        ("https://token@github.com/example/app", "https://github.com/example/app"),
        ("ssh://git@github.com:22/example/app.git", "https://github.com/example/app"),
        ("git@github.com:example/app.git\n", "https://github.com/example/app"),
    ],
)
def test_remote_to_public_url(remote, url):
    assert git_remote_to_public_url(remote) == url


@pytest.mark.parametrize(
    "remote", ["", "not a remote", "/srv/git/app.git", "C:/srv/app.git", "C:\\srv\\app.git", "git@C:/srv/app.git"]
)
def test_unparseable_remote(remote):
    with pytest.raises(ProvenanceError):
        git_remote_to_public_url(remote)


def _fake_git(outputs):
    def run(cmd, **kwargs):
        key = " ".join(cmd[1:])
        if key not in outputs:
            raise subprocess.CalledProcessError(128, cmd, output="", stderr="fatal: not a git repository")
        return subprocess.CompletedProcess(cmd, 0, stdout=outputs[key] + "\n", stderr="")

    return run


def test_discover_provenance(monkeypatch, tmp_path):
    monkeypatch.setattr(
        provenance.subprocess,
        "run",
        _fake_git(
            {
                "config --get remote.origin.url": "git@github.com:example/app.git",
                "rev-parse --abbrev-ref HEAD": "main",
                "rev-parse HEAD": "0123456789abcdef",
            }
        ),
    )
    details = discover_provenance(tmp_path)

    assert details.repositoryUri == "https://github.com/example/app"
    assert details.branch == "main"
    assert details.revisionId == "0123456789abcdef"


def test_detached_head(monkeypatch):
    monkeypatch.setattr(
        provenance.subprocess,
        "run",
        _fake_git(
            {
                "config --get remote.origin.url": "https://github.com/example/app.git",
                "rev-parse --abbrev-ref HEAD": "HEAD",
                "rev-parse HEAD": "abc",
            }
        ),
    )
    assert discover_provenance().branch == DETACHED_HEAD


def test_git_failure_raises(monkeypatch, tmp_path):
    monkeypatch.setattr(provenance.subprocess, "run", _fake_git({}))
    with pytest.raises(ProvenanceError) as excinfo:
        discover_provenance(tmp_path)
    assert "not a git repository" in str(excinfo.value)


def test_missing_git_binary(monkeypatch):
    def run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(provenance.subprocess, "run", run)
    with pytest.raises(ProvenanceError):
        discover_provenance()
