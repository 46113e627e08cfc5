import argparse
import logging
import signal
import sys
from typing import Optional

from alarms.background import BACKGROUND_CHECK_TASK, BackgroundResult, TaskRegistry, register_background_check
from alarms.intent_router import CommandRouter, format_alarm_list
from alarms.monitor import AlarmMonitor
from alarms.notifier import BackgroundNotifier, ForegroundNotifier
from alarms.sounds import AlarmSoundPlayer, LocalSpeaker
from alarms.storage import AlarmStorage
from config import Config, load_config, setup_logging
from hackatime_client import HackatimeClient
from time_utils import SystemClock, resolve_timezone

logger = logging.getLogger("hackatime_monitor")

registry = TaskRegistry()


def graceful_exit(signum, frame) -> None:  # pragma: no cover - signal handler
    logger.info("Shutting down (signal %s)", signum)
    raise KeyboardInterrupt()


def print_alert(alarm_name: str, message: str) -> None:
    print(f"\n*** {alarm_name}! {message} (type 'stop' to silence)", flush=True)


def build_foreground_notifier(config: Config) -> ForegroundNotifier:
    sound_player = AlarmSoundPlayer(config.alarm_sound_path) if config.enable_sound else None
    speaker = LocalSpeaker() if config.enable_speech else None
    return ForegroundNotifier(
        sound_player=sound_player,
        speaker=speaker,
        on_alert=print_alert,
        desktop=config.enable_desktop_notifications,
    )


def run_background_once(config: Config, client: HackatimeClient, storage: AlarmStorage, clock) -> int:
    if config.hackatime_api_key:
        stored_key, store = storage.load()
        if stored_key != config.hackatime_api_key:
            storage.save(config.hackatime_api_key, store)
    register_background_check(
        registry,
        storage=storage,
        time_source=client,
        notifier=BackgroundNotifier(desktop=config.enable_desktop_notifications),
        clock=clock,
    )
    result = registry.run(BACKGROUND_CHECK_TASK)
    logger.info("Background check result: %s", result.value)
    return 1 if result is BackgroundResult.FAILED else 0


def run_interactive(config: Config, client: HackatimeClient, storage: AlarmStorage, clock) -> int:
    monitor = AlarmMonitor(
        storage=storage,
        time_source=client,
        notifier=build_foreground_notifier(config),
        clock=clock,
        poll_interval=config.poll_interval_s,
        api_key=config.hackatime_api_key or None,
    )
    router = CommandRouter(monitor)

    print("Hackatime Monitor")
    print(format_alarm_list(monitor.list_alarms()))
    if not monitor.api_key:
        print("Set your Hackatime API key first: key <api key>")
    print("Type 'help' for commands.")

    monitor.start()
    try:
        while True:
            try:
                line = input("> ")
            except EOFError:
                break
            result = router.handle_text(line)
            if result is None:
                continue
            if result.response_text:
                print(result.response_text)
            if result.quit:
                break
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        monitor.shutdown()
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Alarms on your daily Hackatime coding time.")
    parser.add_argument(
        "--once",
        action="store_true",
        help="run a single background check against stored alarms and exit",
    )
    args = parser.parse_args(argv)

    config = load_config()
    setup_logging(config.log_level, config.log_dir)
    logger.info("Starting Hackatime monitor (storage=%s)", config.alarms_path)

    client = HackatimeClient(config.hackatime_api_url, timeout=config.request_timeout_s)
    storage = AlarmStorage(config.alarms_path)
    clock = SystemClock(resolve_timezone(config.timezone))

    if args.once:
        return run_background_once(config, client, storage, clock)

    signal.signal(signal.SIGINT, graceful_exit)
    return run_interactive(config, client, storage, clock)


if __name__ == "__main__":
    sys.exit(main())
