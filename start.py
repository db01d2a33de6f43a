"""
coinchart - Entry Point
Fetches a coin's price series from CoinGecko and optionally asks Gemini for a short market summary.
"""
import argparse
import asyncio
import sys

from coinchart.config.loader import config
from coinchart.logger.logger import Logger
from coinchart.market.models import Selection
from coinchart.state.controller import SelectionController
from coinchart.state.view_model import ChartView, build_chart_view


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="coinchart - CoinGecko price series with optional AI market summary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python start.py                          # Default coin, currency and range from config
  python start.py ethereum                 # Ethereum in the default currency
  python start.py bitcoin -c eur -d 30     # Bitcoin in EUR over 30 days
  python start.py solana -d 1 --analysis   # Intraday Solana plus a Gemini summary
        """
    )
    parser.add_argument("coin", nargs="?", default=None,
                        help="CoinGecko coin id (e.g., bitcoin). Default: from config")
    parser.add_argument("-c", "--currency", default=None,
                        help="Quote currency id (e.g., usd, eur). Default: from config")
    parser.add_argument("-d", "--days", type=int, default=None,
                        help="Range length in days. Default: from config")
    parser.add_argument("-a", "--analysis", action="store_true",
                        help="Generate a market summary after the data loads")
    return parser.parse_args(argv)


def log_view(logger: Logger, view: ChartView) -> None:
    logger.info(f"{view.title} - {view.subtitle}")
    if view.error:
        logger.error(view.error)
        return
    if view.pair_label:
        badge = f" {view.change_text}" if view.change_text else ""
        logger.info(f"{view.pair_label}  {view.price_text}{badge}")
    if view.message:
        logger.info(view.message)
    if view.points:
        logger.info(f"{view.x_axis_label} / {view.y_axis_label}: {len(view.points)} points")
        first, last = view.points[0], view.points[-1]
        logger.info(f"  {first.label}: {first.price}  ->  {last.label}: {last.price}")


async def main_async(argv=None) -> int:
    """Async entry point for the application"""
    args = parse_args(argv)
    logger = Logger(logger_name="coinchart", logger_debug=config.LOGGER_DEBUG)
    controller = SelectionController.from_config(config, logger)

    try:
        selection = Selection(
            args.coin or config.DEFAULT_COIN,
            args.currency or config.DEFAULT_CURRENCY,
            args.days if args.days is not None else config.DEFAULT_RANGE_DAYS,
        )
    except ValueError as e:
        logger.error(f"Invalid selection: {e}")
        await controller.close()
        return 2

    try:
        controller.select(selection)
        state = await controller.wait_idle()
        log_view(logger, build_chart_view(state))

        if args.analysis:
            if controller.request_analysis() is None:
                logger.warning("Analysis not started")
            state = await controller.wait_idle()
            view = build_chart_view(state)
            if view.analysis_text:
                logger.info(f"Market Analysis:\n{view.analysis_text}")
        return 0 if state.fetch.failure is None else 1
    except asyncio.CancelledError:
        logger.info("Cancelled, shutting down...")
        return 130
    finally:
        await controller.close()


def main() -> None:
    """Main entry point."""
    if sys.platform == 'win32':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

    try:
        exit_code = asyncio.run(main_async())
    except KeyboardInterrupt:
        print("\nKeyboardInterrupt received - shutting down...")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
