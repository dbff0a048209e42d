import os
import shutil
import tempfile
import warnings

import lightfits


class FitsTestCase(object):
    def setup_method(self, method):
        self.temp_dir = tempfile.mkdtemp(prefix='lightfits-test-')

        # Restore global settings to defaults
        for name, value in lightfits.core.GLOBALS:
            setattr(lightfits.core, name, value)
        lightfits.core.set_log_level(lightfits.core.LOG_LEVEL)

        warnings.resetwarnings()
        warnings.simplefilter('always', UserWarning)

    def teardown_method(self, method):
        shutil.rmtree(self.temp_dir)

    def temp(self, filename):
        """ Returns the full path to a file in the test temp dir."""

        return os.path.join(self.temp_dir, filename)
