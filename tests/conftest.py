"""Shared fixtures for nativespeak tests."""

import pytest

from fakes import ARIA, GUY, HIUGAAI, KEITA, NANAMI, WANLUNG, XIAOXIAO, YUNXI, FakeBackend


@pytest.fixture
def all_voices():
    return [XIAOXIAO, YUNXI, HIUGAAI, WANLUNG, NANAMI, KEITA, ARIA, GUY]


@pytest.fixture
def fake_backend(all_voices):
    return FakeBackend(all_voices)
