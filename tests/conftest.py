#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from inspecto.options import InspectOptions, configure
from inspecto.styles import stylize_plain


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def default_options():
    """Restore module default options after every test."""
    yield
    configure(preset="default")


@pytest.fixture
def opts() -> InspectOptions:
    """Default options with the style resolver already resolved, as nodes expect."""
    return InspectOptions(stylize=stylize_plain)
