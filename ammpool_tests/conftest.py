import os

from ammpool.conf import UNITTESTS_SETTINGS_FILEPATH

os.environ['AMMPOOL_CONFIG_YAML'] = os.environ.get('AMMPOOL_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)
