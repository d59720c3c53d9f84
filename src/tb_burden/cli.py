import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from tb_burden.datasets import get_data_dict, get_tb_burden
from tb_burden.dictionary import get_metric_label
from tb_burden.options import StatKind, SummaryOptions
from tb_burden.settings import SETTINGS
from tb_burden.storage import LocalStorage, get_storage
from tb_burden.summarise import summarise_tb_burden


class Formatter(
    argparse.ArgumentDefaultsHelpFormatter,
    argparse.RawDescriptionHelpFormatter,
):
    pass


def configure_logging() -> logging.Logger:
    logger = logging.getLogger()

    # Avoid duplicate handlers if main() is called multiple times
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s-%(filename)s:%(funcName)s:%(lineno)d:%(levelname)s:%(message)s",
            "%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logging.getLogger(__name__)


EPILOG = """
        Usage:
            incidence rates per 100k for the UK, its region and the world
                tb-burden --src-folder data --countries "United Kingdom" --compare-to-region
            median of country case fatality ratios by region in 2019, bootstrapping bounds
                tb-burden --src-folder data --metric cfr --stat median --years 2019 --samples 100
            custom group of countries written to a parquet file
                tb-burden --src-folder data --custom "Southern Africa=Botswana;Namibia" --dst-folder out
        """


def parse_custom(values: list[str] | None) -> dict[str, list[str]] | None:
    """
    Parse custom groups given as NAME=COUNTRY;COUNTRY into a mapping.
    """
    if not values:
        return None
    groups = {}
    for value in values:
        name, _, countries = value.partition("=")
        groups[name.strip()] = [
            country.strip() for country in countries.split(";") if country.strip()
        ]
    return groups


def build_parser() -> argparse.ArgumentParser:
    """
    Build an argparse parser suitable to summarise TB burden from command line.

    Returns
    -------
    argparse.ArgumentParser
        Parser for `main`.
    """
    parser = argparse.ArgumentParser(
        prog="tb-burden",
        description="Summarise WHO TB burden estimates by country, region, globally and for custom groups",
        formatter_class=Formatter,
        epilog=EPILOG,
    )

    parser.add_argument(
        "--metric",
        type=str,
        default="e_inc_num",
        help="Variable to summarise, see the WHO TB data dictionary",
    )
    parser.add_argument(
        "--stat",
        type=str,
        default=StatKind.RATE.value,
        choices=[kind.value for kind in StatKind],
        help="Statistic used to summarise the metric",
    )
    parser.add_argument(
        "--denom",
        type=str,
        default="e_pop_num",
        help="Denominator used for rates and proportions",
    )
    parser.add_argument(
        "--rate-scale",
        type=float,
        default=1e5,
        help="Scaling used for rates, ignored for proportions",
    )
    parser.add_argument(
        "--countries",
        type=str,
        nargs="+",
        metavar="COUNTRY",
        help="Countries to report individually",
    )
    parser.add_argument(
        "--years",
        type=int,
        nargs="+",
        metavar="YEAR",
        help="Years to keep",
    )
    parser.add_argument(
        "--custom",
        type=str,
        action="append",
        metavar="NAME=COUNTRY;COUNTRY",
        help="Custom group of countries. May be repeated",
    )
    parser.add_argument(
        "--compare-to-region",
        action="store_true",
        help="Summarise the regions of the specified countries",
    )
    parser.add_argument(
        "--no-all-regions",
        dest="compare_all_regions",
        action="store_false",
        help="Do not summarise every WHO region",
    )
    parser.add_argument(
        "--no-world",
        dest="compare_to_world",
        action="store_false",
        help="Do not summarise all countries globally",
    )
    parser.add_argument(
        "--no-conf",
        action="store_true",
        help="Ignore confidence bounds and use point estimates only",
    )
    parser.add_argument(
        "--no-truncate",
        dest="truncate_at_zero",
        action="store_false",
        help="Do not truncate negative summaries at zero",
    )
    parser.add_argument(
        "--annual-change",
        action="store_true",
        help="Report the relative change from the previous year",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=SETTINGS.samples,
        help="Number of draws per country used to bootstrap confidence intervals",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=SETTINGS.random_seed,
        help="Random seed for bootstrapping",
    )
    parser.add_argument(
        "--src-folder",
        type=str,
        metavar="PATH",
        help="A path to a directory holding WHO TB datasets. Defaults to LOCAL_STORAGE_PATH",
    )
    parser.add_argument(
        "--dst-folder",
        type=str,
        metavar="PATH",
        help="A path to a directory to write the summary to as parquet. Printed as CSV if omitted",
    )
    parser.add_argument(
        "-d", "--debug", help="Enable debug logging", action="store_true", default=False
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()

    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    logger = configure_logging()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.src_folder is not None:
        storage = LocalStorage(folder_path=Path(args.src_folder).absolute())
    else:
        storage = get_storage()

    options = SummaryOptions(
        metric=args.metric,
        stat=args.stat,
        denom=args.denom,
        rate_scale=args.rate_scale,
        conf=None if args.no_conf else ("_lo", "_hi"),
        years=args.years,
        samples=args.samples,
        countries=args.countries,
        compare_to_region=args.compare_to_region,
        compare_all_regions=args.compare_all_regions,
        compare_to_world=args.compare_to_world,
        custom_compare=parse_custom(args.custom),
        truncate_at_zero=args.truncate_at_zero,
        annual_change=args.annual_change,
    )
    df = get_tb_burden(storage)
    dictionary = get_data_dict(storage) if storage.exists(SETTINGS.dictionary_file) else None
    logger.info("Summarising %s", get_metric_label(dictionary, options.metric))

    df_summary = summarise_tb_burden(df, options, rng=np.random.default_rng(args.seed))
    num_rows, num_cols = df_summary.shape
    if num_rows == 0:
        logger.warning("The summary is empty! Please check the requested countries and years")
        return 1

    if args.dst_folder is None:
        df_summary.to_csv(sys.stdout, index=False)
        return 0

    dst_folder = Path(args.dst_folder).absolute()
    dst_folder.mkdir(parents=True, exist_ok=True)
    name = f"{options.metric}_{options.stat}"
    file_path = LocalStorage(folder_path=dst_folder).write_summary(df_summary, name)
    logger.info(
        f"{num_rows} rows and {num_cols} columns worth of summary data was written to {file_path}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
