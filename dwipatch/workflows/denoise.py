from glob import glob
import logging
import os
import shutil

from dwipatch.denoise.patch2self import MODELS, patch2self
from dwipatch.io.gradients import read_bvals
from dwipatch.io.image import load_nifti, save_nifti
from dwipatch.workflows.workflow import Workflow

logger = logging.getLogger(__name__)


def _expand(pattern):
    fnames = sorted(glob(str(pattern)))
    if not fnames:
        raise FileNotFoundError(f"No file found for {pattern}")
    return fnames


def _output_path(fpath, out_dir, out_name, several):
    base_dir = out_dir or os.path.dirname(os.path.abspath(fpath))
    if several:
        stem = os.path.basename(fpath).split(".")[0]
        base_dir = os.path.join(base_dir, stem)
    os.makedirs(base_dir, exist_ok=True)
    return os.path.join(base_dir, out_name)


class Patch2SelfFlow(Workflow):
    @classmethod
    def get_short_name(cls):
        return "patch2self"

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument(
            "input_files",
            help="Path to the input volumes. This path may contain wildcards "
            "to process multiple inputs at once.",
        )
        parser.add_argument(
            "bval_files", help="bval file associated with the diffusion data."
        )
        parser.add_argument("--model", choices=MODELS, default="ols")
        parser.add_argument(
            "--b0_threshold",
            type=float,
            default=50,
            help="Threshold for considering volumes as b0.",
        )
        parser.add_argument(
            "--alpha",
            type=float,
            default=0.01,
            help="Regularization parameter only for ridge regression model.",
        )
        parser.add_argument(
            "--patch_radius",
            type=int,
            nargs="+",
            default=[0],
            help="The radius of the local patch to be taken around each "
            "voxel, one value for all axes or one per axis.",
        )
        parser.add_argument(
            "--skip_b0_denoising",
            action="store_true",
            help="Skips denoising b0 volumes.",
        )
        parser.add_argument(
            "--num_processes",
            type=int,
            default=1,
            help="Number of volumes fitted concurrently. -1 uses all cores.",
        )
        parser.add_argument("--out_dir", default="", help="Output directory.")
        parser.add_argument(
            "--out_denoised",
            default="dwi_patch2self.nii.gz",
            help="Name of the resulting denoised volume.",
        )

    def run(
        self,
        input_files,
        bval_files,
        model="ols",
        b0_threshold=50,
        alpha=0.01,
        patch_radius=0,
        skip_b0_denoising=False,
        num_processes=1,
        out_dir="",
        out_denoised="dwi_patch2self.nii.gz",
    ):
        """Workflow for Patch2Self denoising method.

        It applies patch2self denoising :footcite:p:`Fadnavis2020` on each
        file found by 'globing' ``input_files`` and ``bval_files``. It saves
        the results in a directory specified by ``out_dir``, or next to each
        input when it is empty.

        Parameters
        ----------
        input_files : string
            Path to the input volumes. This path may contain wildcards to
            process multiple inputs at once.
        bval_files : string
            bval file associated with the diffusion data. Matched to the
            inputs in sorted order.
        model : {'ols', 'ridge'}, optional
            Linear model used to predict each volume.
        b0_threshold : int, optional
            Threshold for considering volumes as b0.
        alpha : float, optional
            Regularization parameter only for ridge regression model.
        patch_radius : int or sequence of int, optional
            The radius of the local patch to be taken around each voxel.
        skip_b0_denoising : bool, optional
            Skips denoising b0 volumes if set to True.
        num_processes : int, optional
            Number of volumes fitted concurrently. -1 uses all cores.
        out_dir : string, optional
            Output directory.
        out_denoised : string, optional
            Name of the resulting denoised volume.

        References
        ----------
        .. footbibliography::

        """
        fnames = _expand(input_files)
        bval_fnames = _expand(bval_files)
        if len(bval_fnames) == 1:
            bval_fnames = bval_fnames * len(fnames)
        elif len(bval_fnames) != len(fnames):
            raise ValueError(
                f"Found {len(fnames)} input files but {len(bval_fnames)} bval files."
            )

        if isinstance(patch_radius, (list, tuple)) and len(patch_radius) == 1:
            patch_radius = int(patch_radius[0])
        engine = "serial" if num_processes == 1 else "joblib"

        several = len(fnames) > 1
        outputs = [_output_path(f, out_dir, out_denoised, several) for f in fnames]
        self.last_generated_outputs = {"out_denoised": outputs[-1]}
        if not self.manage_output_overwrite(outputs):
            return

        for fpath, bvalpath, odenoised in zip(fnames, bval_fnames, outputs):
            if self._skip:
                shutil.copy(fpath, odenoised)
                logger.warning("Denoising skipped for now.")
                continue

            logger.info("Denoising %s", fpath)
            data, affine, image = load_nifti(fpath, return_img=True)
            bvals = read_bvals(bvalpath)
            denoised_data = patch2self(
                data,
                bvals,
                patch_radius=patch_radius,
                model=model,
                b0_threshold=b0_threshold,
                alpha=alpha,
                b0_denoising=not skip_b0_denoising,
                num_processes=num_processes,
                engine=engine,
            )
            save_nifti(odenoised, denoised_data, affine, hdr=image.header)
            logger.info("Denoised volumes saved as %s", odenoised)
