#!/usr/bin/env python3
"""
deltabot - Main Entry Point
Delta robot kinematics and motor command tool
"""

import sys
import argparse
import logging
from dataclasses import replace

from deltabot import __version__
from deltabot.config import DeltaConfig
from deltabot.control import DeltaController, PathDriver
from deltabot.exceptions import DeltaError
from deltabot.hardware import list_available_ports
from deltabot.motion import ForwardKinematics, InverseKinematics


def setup_logging(level: str = "INFO"):
    """Configure logging system"""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    # Console handler
    console_handler = logging.StreamHandler()
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(console_handler)


def list_ports_command() -> int:
    """List available serial ports"""
    print("📋 Available Serial Ports:")
    print("-" * 50)

    ports = list_available_ports()
    if not ports:
        print("❌ No serial ports found!")
        return 1

    for port in ports:
        print(f"\n📍 {port['device']}")
        print(f"   Description: {port['description']}")
        print(f"   Hardware ID: {port['hwid']}")
        if port['is_usb']:
            print("   ✅ USB Device")
    return 0


def inverse_command(config: DeltaConfig, args) -> int:
    angles = InverseKinematics(config.geometry).inverse(args.x, args.y, args.z)
    print("θ1={:.4f}°  θ2={:.4f}°  θ3={:.4f}°".format(*angles))
    return 0


def forward_command(config: DeltaConfig, args) -> int:
    pose = ForwardKinematics(config.geometry).forward(
        args.theta1, args.theta2, args.theta3)
    print("x={:.4f}  y={:.4f}  z={:.4f}".format(*pose))
    return 0


def table_command(controller: DeltaController, args) -> int:
    rows = controller.calibration_report()
    if not rows:
        print("No calibration samples configured")
        return 0

    print(f"{'z':>9} {'measured':>10} {'computed':>10} {'error':>8}")
    print("-" * 40)
    for row in rows:
        print(f"{row['z']:9.3f} {row['measured']:10.3f} "
              f"{row['computed']:10.3f} {row['error']:8.3f}")
    return 0


def move_command(controller: DeltaController, args) -> int:
    if args.from_home:
        controller.home()
    for cmd in controller.move_to(args.x, args.y, args.z):
        print(f"motor {cmd.motor_index}: {cmd.pulse_count} pulses, "
              f"direction {cmd.direction}")
    return 0


def home_command(controller: DeltaController, args) -> int:
    controller.home()
    return 0


def path_command(controller: DeltaController, args) -> int:
    path = controller.config.path
    delay = path.move_delay if args.delay is None else args.delay
    batches = PathDriver(controller, delay).run(path.waypoints)
    print(f"✅ {len(batches)} moves sent")
    return 0


CONTROLLER_COMMANDS = {
    'table': table_command,
    'move': move_command,
    'home': home_command,
    'path': path_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='deltabot',
        description=f'deltabot v{__version__} - Delta Robot Motor Control',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  deltabot inverse 0 0 43          # Arm angles for a pose
  deltabot forward 10 20 30        # Pose for arm angles
  deltabot table                   # Show calibration table
  deltabot --dry-run move 0 0 60   # Plan a move, write frame to a file
  deltabot path                    # Walk the configured waypoints
        """
    )

    parser.add_argument('--version', action='version',
                        version=f'deltabot v{__version__}')
    parser.add_argument('--config', '-c', default=None,
                        help='Config file (default: ~/.deltabot/config.yaml)')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO',
                        help='Set logging level (default: INFO)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Write frames to the configured file instead of the robot')

    sub = parser.add_subparsers(dest='command', required=True)

    inv = sub.add_parser('inverse', help='Arm angles for an effector position')
    for name in ('x', 'y', 'z'):
        inv.add_argument(name, type=float)

    fwd = sub.add_parser('forward', help='Effector position for arm angles')
    for name in ('theta1', 'theta2', 'theta3'):
        fwd.add_argument(name, type=float)

    sub.add_parser('table', help='Show calibration table')

    move = sub.add_parser('move', help='Move effector to a position')
    for name in ('x', 'y', 'z'):
        move.add_argument(name, type=float)
    move.add_argument('--from-home', action='store_true',
                      help='Home before moving')

    sub.add_parser('home', help='Drive arms into the retract limit switches')

    path = sub.add_parser('path', help='Walk the configured waypoints')
    path.add_argument('--delay', type=float, default=None,
                      help='Seconds between moves (default from config)')

    sub.add_parser('ports', help='List available serial ports')

    return parser


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    # Setup logging
    if args.debug:
        args.log_level = 'DEBUG'
    setup_logging(args.log_level)

    if args.command == 'ports':
        return list_ports_command()

    try:
        config = DeltaConfig.load(args.config)

        if args.command == 'inverse':
            return inverse_command(config, args)
        if args.command == 'forward':
            return forward_command(config, args)

        if args.dry_run:
            config.transport = replace(config.transport, kind='file')

        controller = DeltaController(config)
        try:
            return CONTROLLER_COMMANDS[args.command](controller, args)
        finally:
            controller.close()

    except KeyboardInterrupt:
        print("\n\n👋 Interrupted by user")
        return 0
    except DeltaError as e:
        logging.error(f"❌ {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
