#!/usr/bin/env python3
"""
Main script for running the transistor output-characteristic analysis.
"""

# Pipeline overview:
# 1) Load the 4-column tables (V_CE, I_C, errV_CE, errI_C) of every base current.
# 2) Fit I_C = a + b*V_CE over the active-region domain (weighted by errI_C).
# 3) Swap axes over the same window and fit V_CE = a + b*I_C.
# 4) Derive the Early voltage, output conductance and beta at the target V_CE.
# 5) Print one line per quantity and export the overlay chart.

import argparse
import logging
import os
import sys
import time

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from bjtfit.analysis import create_results_dataframe, run_analysis
from bjtfit.config import DEFAULT_VARIANT, VARIANTS, get_config
from bjtfit.errors import MissingDataError
from bjtfit.plotting import plot_output_characteristics
from bjtfit.reporting import print_report


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="BJT output-characteristic analysis")
    ap.add_argument(
        "--variant",
        default=DEFAULT_VARIANT,
        choices=sorted(VARIANTS),
        help="Measurement campaign to analyze",
    )
    ap.add_argument("--data-dir", default=None, help="Directory holding the data tables")
    ap.add_argument("--output", default=None, help="Chart path (extension selects format)")
    ap.add_argument("--no-plot", action="store_true", help="Skip the chart export")
    return ap.parse_args(argv)


def main(argv=None):
    """Main execution function with stage timing."""

    args = parse_args(argv)
    start_time = time.time()
    logging.info("Initializing output-characteristic analysis")

    config = get_config(args.variant)
    if args.data_dir:
        config = config.with_data_dir(args.data_dir)
    if args.output:
        config = config.with_output(args.output)
    logging.info(
        "Variant '%s': %d dataset(s), fit domain [%g, %g] V",
        config.name,
        len(config.datasets),
        *config.fit_domain,
    )

    step_start = time.time()
    try:
        result = run_analysis(config)
    except MissingDataError as exc:
        logging.error("Error: %s Check the file names and the 4-column format.", exc)
        return 1
    logging.info("Fitting completed in %.2f seconds", time.time() - step_start)

    print_report(result)

    fitted = sum(1 for res in result.results if res.ok)
    logging.info("Fitted %d of %d dataset(s)", fitted, len(result.results))
    logging.debug("Summary table:\n%s", create_results_dataframe(result.results).to_string())

    if not args.no_plot:
        step_start = time.time()
        chart_path = plot_output_characteristics(result)
        logging.info("Chart rendered in %.2f seconds: %s", time.time() - step_start, chart_path)

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    logging.info("Analysis pipeline completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
