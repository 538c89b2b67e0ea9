from sgemm.cli import main
from sgemm.kernels import BLOCK_SIZE


def test_benchmark_reports_both_kernels(capsys):
    assert main(["--size", str(BLOCK_SIZE), "--seed", "7"]) == 0
    out = capsys.readouterr().out
    assert "direct:" in out
    assert "tiled:" in out
    assert "Results match" in out


def test_rejects_unaligned_size(capsys):
    assert main(["--size", str(BLOCK_SIZE + 1)]) == 1
    assert "multiple of" in capsys.readouterr().out
