from semlog.core import StructuredLogger as StructuredLogger
from semlog.core import get_logger as get_logger
from semlog.core import logf as logf
from semlog.core import logp as logp
from semlog.core import maplog as maplog
from semlog.core import maplog_fn as maplog_fn
from semlog.core import render_message as render_message
from semlog.core import resolve_logger as resolve_logger
from semlog.errors import EncoderFailure as EncoderFailure
from semlog.errors import InvalidContextKey as InvalidContextKey
from semlog.errors import InvalidLevel as InvalidLevel
from semlog.errors import MissingPlaceholderKey as MissingPlaceholderKey
from semlog.errors import SemlogError as SemlogError
from semlog.interpolation import escape_for_format as escape_for_format
from semlog.interpolation import interpolate as interpolate
from semlog.levels import Level as Level
from semlog.markers import ContextMarker as ContextMarker
from semlog.markers import build_marker as build_marker
