"""Example usage of the sheet matcher with Excel files."""

import pandas as pd
import logging
from pathlib import Path
from typing import Optional

from sheet_matcher.config.models import (
    DuplicateSelection,
    GroupingSettings,
    KeepPolicy,
    MatchMode,
    MergeSettings,
    PrimarySelection,
    SecondarySelection
)
from sheet_matcher.config.rules import (
    NewColumnsRule,
    PatternRule,
    ReturnColumnRules
)
from sheet_matcher.core.frames import dataset_from_frames, table_to_frame
from sheet_matcher.core.grouper import DuplicateGrouper
from sheet_matcher.core.merger import RecordMerger


def read_workbook(path: Path):
    """Read every sheet of an Excel file as strings."""
    logging.info(f"Reading file: {path}")
    frames = pd.read_excel(path, sheet_name=None, dtype=str)
    return dataset_from_frames(path.name, frames)


def lookup_excel_files(
    base_file: Path,
    lookup_file: Path,
    key_column: str,
    output_file: Optional[Path] = None,
    mode: MatchMode = MatchMode.FUZZY,
    tolerance: int = 1
) -> pd.DataFrame:
    """
    Bring columns from a lookup workbook into a base workbook.

    Args:
        base_file: Path to base Excel file
        lookup_file: Path to the Excel file holding the extra columns
        key_column: Header of the key column, present in both files
        output_file: Optional path for output Excel file
        mode: Match mode
        tolerance: Maximum edit distance for fuzzy matches

    Returns:
        pd.DataFrame: Merged data
    """
    try:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s'
        )

        base = read_workbook(base_file)
        lookup = read_workbook(lookup_file)

        base_sheet = base.sheet_names[0]
        lookup_sheet = lookup.sheet_names[0]
        base_header = base.sheets[base_sheet][0]
        lookup_header = lookup.sheets[lookup_sheet][0]

        # Bring over new columns and any URL columns, never internal ids
        rules = ReturnColumnRules(
            include=[NewColumnsRule(), PatternRule(r'url_.*')],
            exclude=['internal_id']
        )
        selection = SecondarySelection.from_rules(
            lookup_sheet,
            list(lookup_header).index(key_column),
            lookup_header,
            base_header,
            rules
        )

        merger = RecordMerger(MergeSettings(mode=mode, tolerance=tolerance, use_index=True))
        result = merger.merge(
            base,
            PrimarySelection(base_sheet, list(base_header).index(key_column)),
            [(lookup, selection)]
        )

        logging.info("\nMatching Statistics:")
        logging.info(f"Total records: {result.stats.total}")
        if result.stats.total:
            logging.info(
                f"Matched records: {result.stats.matched} "
                f"({result.stats.matched / result.stats.total * 100:.1f}%)"
            )
        for warning in result.warnings:
            logging.warning(str(warning))

        results = table_to_frame(result.table)
        if output_file:
            logging.info(f"\nSaving results to: {output_file}")
            with pd.ExcelWriter(
                output_file,
                engine='xlsxwriter',
                engine_kwargs={'options': {'strings_to_urls': False}}
            ) as writer:
                results.to_excel(writer, index=False, sheet_name='MergedData')

        return results

    except Exception as e:
        logging.error(f"An error occurred: {e}", exc_info=True)
        raise


def clean_excel_file(
    data_file: Path,
    output_file: Path,
    keep: KeepPolicy = KeepPolicy.FIRST
) -> None:
    """Write a full duplicate report for the first sheet of a workbook."""
    dataset = read_workbook(data_file)
    sheet = dataset.sheet_names[0]

    grouper = DuplicateGrouper(GroupingSettings(mode=MatchMode.NORMALIZED, keep=keep))
    result = grouper.group(dataset, DuplicateSelection(sheet, whole_row=True))

    views = [
        ('Unique Data', result.unique),
        ('Removed Duplicates', result.removed),
        ('Grouped Review', result.grouped)
    ]
    with pd.ExcelWriter(output_file, engine='xlsxwriter') as writer:
        for name, table in views:
            if len(table) > 1:
                table_to_frame(table).to_excel(writer, index=False, sheet_name=name)


if __name__ == "__main__":
    results_df = lookup_excel_files(
        base_file=Path('data/base_data.xlsx'),
        lookup_file=Path('data/company_data.xlsx'),
        key_column='name',
        output_file=Path('data/VLookup_Results.xlsx')
    )
    clean_excel_file(
        data_file=Path('data/base_data.xlsx'),
        output_file=Path('data/Cleaned_Data_Full_Report.xlsx')
    )
