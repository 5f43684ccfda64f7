from enum import Enum


class TopupStatus(str, Enum):
    COMPLETED = "Completed"
