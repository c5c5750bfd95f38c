import io

import pytest

from sillycode import messages as m


@pytest.fixture
def console():
    # Collects messages as plain text instead of printing them.
    fh = io.StringIO()
    with m.withMessageState(fh=fh, printMode="plain", dieWhen="late"):
        yield fh
