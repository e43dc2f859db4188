from . import person  # noqa
