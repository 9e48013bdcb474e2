from tests.fakes.fake_sync_adapter import FakeSyncAdapter

__all__ = ["FakeSyncAdapter"]
