"""bookcode.core: result type, error values and check digit arithmetic."""

from bookcode.core.errors import BookCodeError as BookCodeError
from bookcode.core.errors import CodeError as CodeError
from bookcode.core.errors import ConvertError as ConvertError
from bookcode.core.errors import ConvertErrorKind as ConvertErrorKind
from bookcode.core.errors import IntegrityError as IntegrityError
from bookcode.core.errors import IntegrityErrorKind as IntegrityErrorKind
from bookcode.core.errors import ParseError as ParseError
from bookcode.core.errors import ParseErrorKind as ParseErrorKind
from bookcode.core.errors import RangeServiceError as RangeServiceError
from bookcode.core.errors import ValidateError as ValidateError
from bookcode.core.errors import ValidateErrorKind as ValidateErrorKind
from bookcode.core.result import Err as Err
from bookcode.core.result import Ok as Ok
from bookcode.core.result import Result as Result
from bookcode.core.result import unwrap as unwrap
from bookcode.core.types import UtcDatetime as UtcDatetime
