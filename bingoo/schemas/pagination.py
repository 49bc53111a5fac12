# Per-endpoint page size limits
class PaginationLimits:
    TRANSACTIONS = {"min": 1, "max": 100, "default": 50}
    GAME_HISTORY = {"min": 1, "max": 100, "default": 50}
    PRIZES = {"min": 1, "max": 100, "default": 50}
    USER_LIST = {"min": 1, "max": 100, "default": 20}
    USER_REPORT = {"min": 1, "max": 500, "default": 50}
    FRAUD_ALERTS = {"min": 1, "max": 100, "default": 50}
