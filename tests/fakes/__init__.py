from tests.fakes.fake_store import FakeStore

__all__ = ["FakeStore"]
