from contextlib import AbstractContextManager
import datetime
import enum
import json
import sys
from types import TracebackType
from typing import TextIO, TypedDict, TYPE_CHECKING

if TYPE_CHECKING:
    from typing_extensions import Self

if sys.version_info >= (3, 11):

    class PorcelainEntityType(enum.StrEnum):
        LogV1 = "log-v1"
        PostSummaryV1 = "postsummary-v1"
        PostCheckResultV1 = "postcheckresult-v1"

else:

    class PorcelainEntityType(str, enum.Enum):
        LogV1 = "log-v1"
        PostSummaryV1 = "postsummary-v1"
        PostCheckResultV1 = "postcheckresult-v1"


class PorcelainEntity(TypedDict):
    ty: PorcelainEntityType


def _encode_non_json(obj: object) -> str:
    if isinstance(obj, (datetime.datetime, datetime.date)):
        return obj.isoformat()
    raise TypeError(f"cannot encode {type(obj)} for porcelain output")


class PorcelainOutput(AbstractContextManager["PorcelainOutput"]):
    """Emits one compact JSON document per line to a text stream."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = sys.stdout if out is None else out

    def __enter__(self) -> "Self":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool | None:
        self.out.flush()
        return None

    def emit(self, obj: PorcelainEntity) -> None:
        s = json.dumps(
            obj,
            ensure_ascii=False,
            separators=(",", ":"),
            default=_encode_non_json,
        )
        self.out.write(s)
        self.out.write("\n")
