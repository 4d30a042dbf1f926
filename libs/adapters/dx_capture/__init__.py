from .fakes import FakeCapturePort

__all__ = ["FakeCapturePort"]
