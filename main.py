#!/usr/bin/env python3
# ========================
# main.py
# ========================

"""
Main Entry Point for the EV Insights Pipeline

Generates a sample EV population dataset when none exists, runs the pipeline
and prints the headline dashboard figures.
"""

import sys
import logging
from pathlib import Path

from ev_insights.pipeline import DataPipeline
from ev_insights.utils import Config, setup_logging, DataGenerator
from ev_insights.utils.formatters import (
    format_number,
    format_percentage,
    format_range,
    get_change_indicator,
)


def main():
    """Main execution function."""
    config = Config()

    setup_logging(
        log_level=config.LOG_LEVEL,
        log_file="pipeline.log",
        log_dir=config.LOGS_DIR
    )

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("EV INSIGHTS PIPELINE - MAIN EXECUTION")
    logger.info("=" * 60)

    try:
        config.ensure_directories()
        input_file = config.DEFAULT_INPUT_FILE

        # Step 1: Make sure there is data to analyse
        generation_stats = None
        if not Path(input_file).exists():
            logger.info("Step 1: No input found, generating sample data...")
            generator = DataGenerator(seed=42)
            generation_stats = generator.generate_dataset(
                file_path=input_file,
                num_rows=config.DEFAULT_SAMPLE_ROWS,
                error_rate=config.SAMPLE_ERROR_RATE
            )
        else:
            logger.info(f"Step 1: Using existing dataset {input_file}")

        # Step 2: Run the pipeline
        logger.info("Step 2: Running pipeline...")
        pipeline = DataPipeline(input_file=input_file, config=config)

        if not pipeline.validate_input():
            logger.error("Input validation failed. Exiting.")
            return 1

        results = pipeline.run()

        # Step 3: Print summary
        _print_execution_summary(results, generation_stats)

        logger.info("Pipeline execution completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Pipeline execution failed: {e}", exc_info=True)
        return 1


def _print_execution_summary(results: dict, generation_stats) -> None:
    """Print final execution summary."""
    parse_stats = results['parse_stats']
    dashboard = results['dashboard']
    kpis = dashboard['kpis']

    print("\n" + "=" * 70)
    print("EV INSIGHTS SUMMARY")
    print("=" * 70)

    if generation_stats:
        print("📊 Sample Data:")
        print(f"   • Rows generated: {generation_stats['total_rows']:,}")
        print(f"   • Injected defects: {generation_stats['error_types']}")

    print("\n🔄 Parsing:")
    print(f"   • Data lines read: {parse_stats['lines_read']:,}")
    print(f"   • Vehicles kept: {parse_stats['records_cleaned']:,}")
    print(f"   • Rows dropped: {parse_stats['records_dropped']:,}")
    print(f"   • Blank lines: {parse_stats['blank_lines']:,}")

    print("\n⚡ KPIs:")
    print(f"   • Total vehicles: {format_number(kpis['total_vehicles'])}")
    print(f"   • BEV share: {format_percentage(kpis['bev_percentage'])}")
    print(f"   • Average range: {format_range(kpis['avg_range'])}")
    top = kpis['top_manufacturer']
    if top:
        print(f"   • Top manufacturer: {top['name']} ({format_percentage(top['share'])})")
    indicator = get_change_indicator(kpis['yoy_change'])
    print(f"   • Year-over-year: {indicator['icon']} {format_percentage(abs(kpis['yoy_change']))}")

    print("\n🏆 Top Models:")
    for entry in dashboard['top_models'][:5]:
        print(f"   • {entry['make']} {entry['model']}: {format_number(entry['count'])} "
              f"({entry['vehicle_type']}, avg {format_range(entry['avg_range'])})")

    print("\n🚀 Next Steps:")
    print("   1. Start API server: python api_server.py")
    print("   2. Run large scale test: python scripts/run_large_scale_test.py")
    print("   3. Check logs: logs/pipeline.log")
    print("=" * 70)


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
