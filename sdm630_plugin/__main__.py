"""
Command line check of an SDM630 outside the host:

    python -m sdm630_plugin test --device /dev/ttyUSB0
    python -m sdm630_plugin read --interface hf2211 --host 192.168.1.20 --port 8899
"""
import argparse
import logging
import sys

from .errors import ProviderError
from .logging_config import configure
from .plugin import Sdm630
from .setting import ModbusEncoding, ProviderData, SupportedInterface

logger = logging.getLogger("sdm630_plugin")

SUMMARY_NAMES = ["Gesamtleistung", "Bezug_Energie", "Einspeisung_Energie", "Frequenz"]


def build_parser():
    parser = argparse.ArgumentParser(prog="sdm630_plugin", description="SDM630 Modbus provider check")
    parser.add_argument("command", choices=["test", "read"])
    parser.add_argument("--interface", choices=[i.value for i in SupportedInterface if i is not SupportedInterface.NONE],
                        default=SupportedInterface.NAMED_USB.value)
    parser.add_argument("--device", default="/dev/ttyUSB0", help="serial device for USB interfaces")
    parser.add_argument("--host", default="", help="HF2211 host")
    parser.add_argument("--port", type=int, default=502, help="HF2211 port")
    parser.add_argument("--address", type=int, help="Modbus device address")
    parser.add_argument("--baudrate", type=int)
    parser.add_argument("--encoding", choices=[e.value for e in ModbusEncoding])
    parser.add_argument("--locale")
    parser.add_argument("--debug", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure("DEBUG" if args.debug else None)

    provider = Sdm630()
    if args.locale:
        provider.set_locale(args.locale)

    setting = provider.get_default_provider_setting()
    setting.interface = SupportedInterface(args.interface)
    setting.serial_device = args.device
    setting.provider_host = args.host
    setting.provider_port = args.port
    if args.address is not None:
        setting.provider_address = args.address
    if args.baudrate is not None:
        setting.baudrate = args.baudrate
    if args.encoding is not None:
        setting.encoding = ModbusEncoding(args.encoding)

    try:
        if args.command == "test":
            provider.test_provider_connection(setting)
            logger.info("Connection ok")
            return 0

        provider.set_provider_data(ProviderData(name="SDM630 cli", plugin_name="Sdm630", setting=setting))
        provider.do_on_first_run()
        variables = {}
        provider.do_activity_work(variables)
    except ProviderError as e:
        logger.error(str(e))
        return 1

    for name, value in variables.items():
        logger.debug(f"{name}: {value}")
    line_parts = [f"{name}: {variables.get(name, 'N/A')}" for name in SUMMARY_NAMES]
    logger.info(" | ".join(line_parts))
    return 0


if __name__ == "__main__":
    sys.exit(main())
