import logging
import os

import numpy as np
import numpy.testing as npt
import pytest

from dwipatch.io.image import load_nifti, save_nifti
from dwipatch.testing import assert_false, assert_true
from dwipatch.testing.decorators import set_random_number_generator
from dwipatch.utils.logging import configure_logger
from dwipatch.workflows.denoise import Patch2SelfFlow
from dwipatch.workflows.flow_runner import build_parser, get_level, run_flow


def _write_dwi(out_dir, rng, name="dwi"):
    data = 100 + 2 * rng.standard_normal((8, 8, 6, 12))
    data_path = os.path.join(out_dir, f"{name}.nii.gz")
    bval_path = os.path.join(out_dir, f"{name}.bval")
    save_nifti(data_path, data.astype(np.float32), np.eye(4))
    np.savetxt(bval_path, [0, 0] + [1000] * 10, newline=" ")
    return data_path, bval_path


@set_random_number_generator()
def test_patch2self_flow(tmp_path, rng):
    out_dir = str(tmp_path)
    data_path, bval_path = _write_dwi(out_dir, rng)

    patch2self_flow = Patch2SelfFlow()
    patch2self_flow.run(data_path, bval_path, patch_radius=[0], out_dir=out_dir)
    denoised_path = patch2self_flow.last_generated_outputs["out_denoised"]
    assert_true(os.path.isfile(denoised_path))

    data, affine = load_nifti(data_path)
    denoised, denoised_affine = load_nifti(denoised_path)
    npt.assert_equal(denoised.shape, data.shape)
    npt.assert_array_almost_equal(denoised_affine, affine)
    assert_true(denoised.std() < data.std())

    # existing outputs are only replaced with force
    mtime = os.path.getmtime(denoised_path)
    patch2self_flow.run(data_path, bval_path, out_dir=out_dir)
    npt.assert_equal(os.path.getmtime(denoised_path), mtime)

    patch2self_flow._force_overwrite = True
    patch2self_flow.run(
        data_path, bval_path, model="ridge", skip_b0_denoising=True, out_dir=out_dir
    )
    denoised, _ = load_nifti(denoised_path)
    npt.assert_array_equal(denoised[..., :2], data[..., :2])


@set_random_number_generator()
def test_patch2self_flow_several_inputs(tmp_path, rng):
    out_dir = str(tmp_path / "out")
    in_dir = str(tmp_path)
    _write_dwi(in_dir, rng, name="sub-01_dwi")
    _, bval_path = _write_dwi(in_dir, rng, name="sub-02_dwi")

    flow = Patch2SelfFlow()
    flow.run(os.path.join(in_dir, "sub-*_dwi.nii.gz"), bval_path, out_dir=out_dir)
    for sub in ["sub-01_dwi", "sub-02_dwi"]:
        assert_true(os.path.isfile(os.path.join(out_dir, sub, "dwi_patch2self.nii.gz")))

    with pytest.raises(FileNotFoundError):
        flow.run(os.path.join(in_dir, "missing*.nii.gz"), bval_path)


@set_random_number_generator()
def test_patch2self_flow_skip(tmp_path, rng):
    data_path, bval_path = _write_dwi(str(tmp_path), rng)
    flow = Patch2SelfFlow(skip=True)
    flow.run(data_path, bval_path, out_dir=str(tmp_path / "skipped"))
    out_path = flow.last_generated_outputs["out_denoised"]
    data, _ = load_nifti(data_path)
    skipped, _ = load_nifti(out_path)
    npt.assert_array_equal(skipped, data)


@set_random_number_generator()
def test_run_flow(tmp_path, rng):
    data_path, bval_path = _write_dwi(str(tmp_path), rng)
    log_file = str(tmp_path / "log.txt")
    out_dir = str(tmp_path / "cli")

    run_flow(
        Patch2SelfFlow(),
        [
            data_path,
            bval_path,
            "--patch_radius", "1", "1", "0",
            "--model", "ridge",
            "--out_dir", out_dir,
            "--log_file", log_file,
        ],
    )
    assert_true(os.path.isfile(os.path.join(out_dir, "dwi_patch2self.nii.gz")))
    for handler in logging.getLogger("dwipatch").handlers:
        handler.flush()
    with open(log_file) as f:
        assert_true("Denoised volumes saved as" in f.read())
    configure_logger()


def test_build_parser():
    parser = build_parser(Patch2SelfFlow())
    args = vars(parser.parse_args(["dwi.nii.gz", "dwi.bval"]))
    npt.assert_equal(args["patch_radius"], [0])
    npt.assert_equal(args["model"], "ols")
    assert_false(args["force"])

    with pytest.raises(SystemExit):
        parser.parse_args(["dwi.nii.gz", "dwi.bval", "--model", "lasso"])


def test_get_level():
    npt.assert_equal(get_level("DEBUG"), logging.DEBUG)
    npt.assert_equal(get_level("warning"), logging.WARNING)
    npt.assert_equal(get_level("NOPE"), logging.INFO)
