"""CLI smoke tests: seed → check, and a diverging replay."""
import pytest

from engine_equiv import cli, client
from engine_equiv.comparator import ForkchoiceComparator
from engine_equiv.models import fingerprint


def test_seed_writes_fingerprinted_files(tmp_path, capsys):
    assert cli.main(["seed", "-o", str(tmp_path)]) == 0
    names = sorted(p.name for p in tmp_path.iterdir())
    assert [n.split("-")[0] for n in names] == ["block", "forkchoice", "header"]
    for p in tmp_path.iterdir():
        assert p.name.endswith(fingerprint(p.read_bytes()))
    assert "forkchoice seed" in capsys.readouterr().out


@pytest.mark.parametrize("target", ["forkchoice", "header", "block"])
def test_check_seed_corpus(tmp_path, target, capsys):
    cli.main(["seed", "-o", str(tmp_path), "-t", target])
    assert cli.main(["check", "-t", target, str(tmp_path)]) == 0
    assert "passed 1" in capsys.readouterr().out


def test_check_garbage_is_rejected_not_failed(tmp_path, capsys):
    bad = tmp_path / "bad"
    bad.write_bytes(b"\xff\x00{")
    assert cli.main(["check", "-t", "header", str(bad)]) == 0
    assert "rejected 1" in capsys.readouterr().out


class _DropsStatus(client.ForkchoiceUpdatedResponse):
    def encode(self):
        self.status.latest_valid_hash = None
        return super().encode()


def test_divergence_exit_code_and_findings(tmp_path, monkeypatch, capsys):
    corpus, findings = tmp_path / "corpus", tmp_path / "findings"
    cli.main(["seed", "-o", str(corpus), "-t", "forkchoice"])
    broken = type("Broken", (ForkchoiceComparator,), {"narrow": _DropsStatus})
    monkeypatch.setitem(cli.TARGETS, "forkchoice", broken)

    rc = cli.main(["check", "-t", "forkchoice", str(corpus), "--findings-dir", str(findings)])
    assert rc == 1
    out = capsys.readouterr().out
    assert "invariant C broken" in out and "latestValidHash" in out
    saved = list(findings.iterdir())
    assert len(saved) == 1
    assert saved[0].read_bytes() == next(corpus.iterdir()).read_bytes()
