from coinchart.analysis.generator import AnalysisGenerator, NO_DATA_REASON
from coinchart.analysis.prompt_builder import PromptBuilder

__all__ = [
    'AnalysisGenerator',
    'NO_DATA_REASON',
    'PromptBuilder',
]
