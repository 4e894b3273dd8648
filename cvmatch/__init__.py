"""Semantic matching and scoring of job requirements against CV profile items."""

from cvmatch.utils.constants import APP_NAME, VERSION

__version__ = VERSION
__app_name__ = APP_NAME
