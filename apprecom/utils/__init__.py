from .excel_io import (
    save_training_results,
    save_rules_text,
    format_rule_for_excel
)

__all__ = [
    'save_training_results',
    'save_rules_text',
    'format_rule_for_excel'
]
