from typing import Dict

import msgspec


class RequestSuccess(msgspec.Struct, tag="success", kw_only=True):
    headers: Dict[str, str]
    body: str
    status: int
    hostname: str

    @property
    def successful(self) -> bool:
        return True

    def to_record(self):
        return {
            "headers": self.headers,
            "body": self.body,
            "status": self.status,
            "hostname": self.hostname,
            "success": True,
        }


class RequestFailure(msgspec.Struct, tag="failure", kw_only=True):
    error: str

    @property
    def successful(self) -> bool:
        return False

    def to_record(self):
        return {
            "success": False,
            "error": self.error,
        }


ExecutionResult = RequestSuccess | RequestFailure
