"""
Domain Event Base Class
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DomainEvent:
    """Domain Event 기본 클래스"""
    # 이벤트 발생 시각 (UTC)
    timestamp: datetime

    @property
    def event_type(self) -> str:
        """로그에 남기는 이벤트 이름 (클래스 이름)"""
        return self.__class__.__name__
