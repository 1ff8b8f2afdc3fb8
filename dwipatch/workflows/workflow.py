import logging
import os

from dwipatch.testing.decorators import warning_for_keywords

logger = logging.getLogger(__name__)


class Workflow:
    @warning_for_keywords()
    def __init__(self, *, force=False, skip=False):
        """Initialize the basic workflow object.

        This object takes care of any workflow operation that is common to all
        the workflows. Every new workflow should extend this class.

        Parameters
        ----------
        force : bool, optional
            Overwrite output files that already exist.
        skip : bool, optional
            Copy the inputs to the outputs instead of processing them.
        """
        self.last_generated_outputs = None
        self._force_overwrite = force
        self._skip = skip

    def manage_output_overwrite(self, outputs):
        """Check if a file will be overwritten upon processing the inputs.

        If it is bound to happen, an action is taken depending on
        self._force_overwrite (or --force via command line). A log message is
        output independently of the outcome to tell the user something
        happened.

        Returns
        -------
        bool
            True if processing may go on.
        """
        duplicates = [output for output in outputs if os.path.isfile(output)]
        if not duplicates:
            return True

        if self._force_overwrite:
            logger.info("The following output files are about to be overwritten.")
        else:
            logger.info(
                "The following output files already exist, the workflow will "
                "not continue processing any further. Add the --force flag to "
                "allow output files overwrite."
            )
        for dup in duplicates:
            logger.info(dup)

        return self._force_overwrite

    def run(self, *args, **kwargs):
        """Execute the workflow.

        Since this is an abstract class, raise exception if this code is
        reached (not implemented in child class or literally called on this
        class)
        """
        raise NotImplementedError(f"{self.__class__} does not have a run method.")

    @classmethod
    def get_short_name(cls):
        """Return a short name for the workflow, used on the command line.

        Returns class name by default but it is strongly advised to set it to
        something shorter and easier to write on commandline.
        """
        return cls.__name__

    @classmethod
    def add_arguments(cls, parser):
        """Add the arguments of :meth:`run` to an argparse parser."""
        raise NotImplementedError(f"{cls} does not declare its arguments.")
