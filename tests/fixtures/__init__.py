"""Shared test fixtures for the exporter test suite.

    from tests.fixtures.dummies import FakeSource, RecordingCounter
    from tests.fixtures.factories import make_raw_op, make_record

Or import everything from the package:

    from tests.fixtures import FakeSource, make_raw_op
"""

from tests.fixtures.dummies import (
    FakeSource,
    RecordingCounter,
    RecordingHistogram,
    RecordingErrorHandler,
)

from tests.fixtures.factories import (
    make_raw_op,
    make_record,
    make_settings,
)

__all__ = [
    # Dummies
    'FakeSource',
    'RecordingCounter',
    'RecordingHistogram',
    'RecordingErrorHandler',
    # Factories
    'make_raw_op',
    'make_record',
    'make_settings',
]
