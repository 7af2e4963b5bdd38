"""Warning categories emitted while building visualizations.

Nothing in a rendering pass raises: malformed samples are replaced with safe
defaults and reported through :func:`warnings.warn` with one of these
categories, so callers can filter or escalate them with the standard warning
filters (``pytest.warns``, ``-W error::wbtviz.NonFiniteStateWarning``, ...).
"""


class WbtvizWarning(UserWarning):
    """Base class for every diagnostic emitted by wbtviz."""


class NonFiniteStateWarning(WbtvizWarning):
    """A base pose or contact position contained NaN/inf and was reset."""


class FrameTransformWarning(WbtvizWarning):
    """The message frame could not be resolved into the fixed frame."""


class EmptyTrajectoryWarning(WbtvizWarning):
    """A trajectory without steps or base states was received."""
