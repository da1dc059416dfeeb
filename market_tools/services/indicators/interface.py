"""
Indicator Service Interface

Defines the contract for the indicator pipeline.
"""

from abc import abstractmethod
from typing import Union

from market_tools.services.base import BaseService
from market_tools.schemas.indicators import (
    AnalysisRequest,
    IndicatorReport,
    IndicatorRequest,
    NoDataResult,
    TechnicalAnalysisReport,
)


class IndicatorServiceInterface(
    BaseService[IndicatorRequest, Union[IndicatorReport, NoDataResult]]
):
    """
    Indicator Service Contract.

    INPUT: IndicatorRequest
        - symbol, indicator kind, period, date range

    OUTPUT: IndicatorReport | NoDataResult
        - Typed points aligned to their calendar dates
        - NoDataResult when the provider returned no bars
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(
        self, input_data: IndicatorRequest
    ) -> Union[IndicatorReport, NoDataResult]:
        """Compute and align one indicator for a symbol."""
        pass

    @abstractmethod
    async def analyze(
        self, input_data: AnalysisRequest
    ) -> Union[TechnicalAnalysisReport, NoDataResult]:
        """
        Run the composite analysis for a symbol.

        Returns:
            Latest indicator values, support/resistance levels and trend
            observations, or NoDataResult
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
