from __future__ import annotations

import numpy as np
import pytest

from overdraw.app import run_app
from overdraw.cli import main
from overdraw.mesh.builder import build_box
from overdraw.mesh.io import load_mesh, save_mesh


def _run(**kwargs):
    args = dict(
        mesh_kind="mixed",
        seed=1,
        input_path=None,
        output_path=None,
        cache_size=16,
        threshold=1.05,
        in_place=False,
        debug=False,
        grid_res=6,
        sphere_segments=8,
        sphere_rings=4,
    )
    args.update(kwargs)
    return run_app(**args)


def test_report_counts():
    report = _run()
    assert report.triangles == 6 * 2 * 25 + 8 * 4 * 2
    assert report.hard_clusters >= 7
    assert report.soft_clusters >= report.hard_clusters
    assert 0.5 <= report.acmr_before <= 3.0
    assert 0.5 <= report.acmr_after <= 3.0


def test_in_place_report_matches(capsys):
    a = _run(in_place=False)
    b = _run(in_place=True)
    assert a.acmr_after == b.acmr_after
    assert "acmr" in capsys.readouterr().out


def test_debug_output(capsys):
    _run(debug=True)
    out = capsys.readouterr().out
    assert "[overdraw] clusters hard=" in out


def test_cli_roundtrip(tmp_path, capsys):
    src = tmp_path / "in.npz"
    dst = tmp_path / "out.npz"
    box = build_box(4, 2.0, seed=9, amplitude=0.1)
    save_mesh(src, box)

    main(["--input", str(src), "--output", str(dst), "--threshold", "1.5", "--debug"])

    out = load_mesh(dst)
    assert np.array_equal(out.vertices, box.vertices)
    assert sorted(map(tuple, out.indices.reshape(-1, 3).tolist())) == sorted(map(tuple, box.indices.reshape(-1, 3).tolist()))
    assert "wrote" in capsys.readouterr().out


def test_cli_rejects_small_cache():
    with pytest.raises(ValueError):
        main(["--mesh", "box", "--grid-res", "3", "--cache-size", "2"])
