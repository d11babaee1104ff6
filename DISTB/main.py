import sys
import time
import logging
import argparse
from pathlib import Path

from DISTB.config import Config, ConfigError, ConfigStore
from DISTB.src.core.scheduler import TICK_PERIOD_S, TickScheduler
from DISTB.src.core.types import Vec3
from DISTB.src.drivers.host import SimulatedHost

logger = logging.getLogger("DISTB")

def parse_position(text: str) -> Vec3:
    parts = [p for p in text.replace(",", " ").split() if p]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected X,Y,Z but got {text!r}")
    try:
        return Vec3(*(float(p) for p in parts))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc

def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a whole number but got {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0 (got {value})")
    return value

def run_headless(scheduler: TickScheduler, host: SimulatedHost, ticks: int, period_s: float) -> None:
    for _ in range(ticks):
        started = time.monotonic()
        host.step()
        report = scheduler.tick()
        if report.tick % 20 == 0 or report.failures:
            logger.info(
                "tick=%d angle=%.3f observers=%d beams=%d markers=%d cues=%d failures=%d",
                *report,
            )
        remaining = period_s - (time.monotonic() - started)
        if remaining > 0:
            time.sleep(remaining)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Distance beam simulator")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default ~/.distb_config.json)")
    parser.add_argument("--observers", type=non_negative_int, default=4, help="Number of simulated observers")
    parser.add_argument("--seed", type=int, default=0, help="Random seed for the simulated walkers")
    parser.add_argument("--headless", action="store_true", help="Run without the preview window")
    parser.add_argument("--ticks", type=non_negative_int, default=200, help="Ticks to run in headless mode")
    parser.add_argument("--snapshot", type=parse_position, metavar="X,Y,Z",
                        help="Export one beam frame for an observer at X,Y,Z and exit")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING or ERROR")
    return parser

def main():
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = ConfigStore(args.config)
    store.save_default()
    try:
        store.load()
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)
    config: Config = store.current

    if args.snapshot is not None:
        from DISTB.src.core.snapshot import export_beam_snapshot
        try:
            csv_path, plot_path = export_beam_snapshot(config, args.snapshot)
        except ValueError as exc:
            parser.error(f"cannot draw a beam from {tuple(args.snapshot)}: {exc}")
        print(f"Saved {csv_path} and {plot_path}")
        return

    host = SimulatedHost(config, observer_count=args.observers, seed=args.seed)
    scheduler = TickScheduler(host, store)

    if args.headless:
        run_headless(scheduler, host, args.ticks, TICK_PERIOD_S)
        return

    from PyQt5 import QtWidgets
    import pyqtgraph as pg
    from DISTB.src.core.worker import TickWorker
    from DISTB.src.ui.layouts.preview import PreviewPage
    from DISTB.src.ui.theme import apply_theme

    class MainWindow(QtWidgets.QMainWindow):
        def __init__(self):
            super().__init__()
            self.worker = TickWorker(scheduler, store, pre_tick=host.step)

            self.setWindowTitle("DISTB: Distance Beam Preview")
            self.resize(1000, 800)

            self.page = PreviewPage(host, self.worker, store)
            self.setCentralWidget(self.page)
            self.worker.start()

        def closeEvent(self, event):
            logger.info("Closing application...")
            self.worker.stop()
            event.accept()

    app = QtWidgets.QApplication(sys.argv)
    pg.setConfigOptions(antialias=True)
    apply_theme(app)

    window = MainWindow()
    window.show()

    sys.exit(app.exec_())

if __name__ == "__main__":
    main()
