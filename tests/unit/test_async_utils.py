"""Unit tests for run_async."""
import asyncio

import pytest

from festival_admin.utils.async_utils import run_async


async def _answer():
    await asyncio.sleep(0)
    return 42


class TestRunAsync:
    """Test run_async function."""

    def test_without_running_loop(self):
        assert run_async(_answer) == 42

    def test_inside_running_loop(self):
        async def outer():
            return run_async(_answer)

        assert asyncio.run(outer()) == 42

    def test_exception_propagates(self):
        async def boom():
            raise LookupError("missing")

        with pytest.raises(LookupError, match="missing"):
            run_async(boom)
