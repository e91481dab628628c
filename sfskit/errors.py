"""Kernel error codes and their human-readable descriptions."""

from enum import IntEnum

__all__ = ["ErrorCode", "MAXERROR", "error_string"]


class ErrorCode(IntEnum):
    """Error codes reported by the kernel; callers may see them negated."""

    UNSPECIFIED = 1
    BAD_PROC = 2
    INVAL = 3
    NO_MEM = 4
    NO_FREE_PROC = 5
    FAULT = 6
    SWAP_FAULT = 7
    INVAL_ELF = 8
    KILLED = 9
    PANIC = 10
    TIMEOUT = 11
    TOO_BIG = 12
    NO_DEV = 13
    NA_DEV = 14
    BUSY = 15
    NOENT = 16
    ISDIR = 17
    NOTDIR = 18
    XDEV = 19
    UNIMP = 20
    SEEK = 21
    MAX_OPEN = 22
    EXISTS = 23
    NOTEMPTY = 24

    @property
    def message(self) -> str:
        """The description printed for this code."""
        return error_string(self)


MAXERROR = max(ErrorCode)

# SWAP_FAULT, TIMEOUT and TOO_BIG deliberately have no text.
_MESSAGES = {
    ErrorCode.UNSPECIFIED: "unspecified error",
    ErrorCode.BAD_PROC: "bad process",
    ErrorCode.INVAL: "invalid parameter",
    ErrorCode.NO_MEM: "out of memory",
    ErrorCode.NO_FREE_PROC: "out of processes",
    ErrorCode.FAULT: "segmentation fault",
    ErrorCode.INVAL_ELF: "invalid elf file",
    ErrorCode.KILLED: "process is killed",
    ErrorCode.PANIC: "panic failure",
    ErrorCode.NO_DEV: "no such device",
    ErrorCode.NA_DEV: "device not available",
    ErrorCode.BUSY: "device/file is busy",
    ErrorCode.NOENT: "no such file or directory",
    ErrorCode.ISDIR: "is a directory",
    ErrorCode.NOTDIR: "not a directory",
    ErrorCode.XDEV: "cross device link",
    ErrorCode.UNIMP: "unimplemented feature",
    ErrorCode.SEEK: "illegal seek",
    ErrorCode.MAX_OPEN: "too many files are open",
    ErrorCode.EXISTS: "file or directory already exists",
    ErrorCode.NOTEMPTY: "directory is not empty",
}


def error_string(code: int) -> str:
    """Describe an error code; negative codes are treated like positive ones."""
    code = abs(int(code))
    message = _MESSAGES.get(code)
    if message is None:
        return f"error {code}"
    return message