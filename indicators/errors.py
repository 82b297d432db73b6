"""
지표 계산 예외 정의

모든 예외는 IndicatorError를 상속.
InvalidParameterError/InsufficientDataError는 ValueError,
ColumnNotFoundError는 KeyError도 함께 상속하여 기존 except 절과 호환.
"""


class IndicatorError(Exception):
    """지표 계산 예외 (기본 클래스)"""

    pass


class InvalidParameterError(IndicatorError, ValueError):
    """잘못된 파라미터

    period <= 0, 정수가 아닌 period, 필수 파라미터 누락,
    다중 시리즈 입력의 길이 불일치 등
    """

    pass


class ColumnNotFoundError(IndicatorError, KeyError):
    """요청한 컬럼이 테이블에 없음"""

    def __init__(self, column: str, available: list[str] | None = None) -> None:
        self.column = column
        self.available = available or []
        super().__init__(column)

    def __str__(self) -> str:
        return f"컬럼을 찾을 수 없습니다: '{self.column}' (사용 가능: {self.available})"


class InsufficientDataError(IndicatorError, ValueError):
    """입력 길이가 0

    window > 길이인 경우는 에러가 아님 (전체 NaN 출력)
    """

    pass
