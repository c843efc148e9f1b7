"""
PixelForge Studio
Photo to pixel art: grid alignment, color reduction and downsampling with undo
"""

import logging
import sys
import warnings

warnings.filterwarnings('ignore', category=RuntimeWarning)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def run_gui():
    """Launch the GUI application."""
    from PySide6.QtWidgets import QApplication
    from PySide6.QtCore import Qt
    from gui.main_window import MainWindow, APP_NAME, APP_VERSION

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setStyle("Fusion")

    window = MainWindow()
    window.show()
    sys.exit(app.exec())


def print_usage():
    print("Usage: python main.py --cli <image_path> [options]")
    print("       python main.py --cli --synthetic [options]")
    print()
    print("Options (applied in this order):")
    print("  --align N              average N x N blocks")
    print("  --denoise S T C        strength %, tolerance %, max colors")
    print("  --downsample N         one output pixel per N x N block")
    print("  --scale F              export scale factor (default 1.0)")
    print("  --out PATH             output file (default pixelart.png)")
    print("  --verbose              debug logging")


def parse_cli_args(args):
    """Parse --cli options into a dict. Raises ValueError on bad input."""
    options = {
        'source': None,
        'align': None,
        'denoise': None,
        'downsample': None,
        'scale': 1.0,
        'out': 'pixelart.png',
        'verbose': False,
    }

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == '--align':
            options['align'] = int(args[i + 1])
            i += 2
        elif arg == '--denoise':
            values = args[i + 1:i + 4]
            if len(values) != 3:
                raise ValueError("--denoise takes three values: strength tolerance colors")
            options['denoise'] = (float(values[0]), float(values[1]), int(values[2]))
            i += 4
        elif arg == '--downsample':
            options['downsample'] = int(args[i + 1])
            i += 2
        elif arg == '--scale':
            options['scale'] = float(args[i + 1])
            i += 2
        elif arg == '--out':
            options['out'] = args[i + 1]
            i += 2
        elif arg == '--verbose':
            options['verbose'] = True
            i += 1
        elif options['source'] is None:
            options['source'] = arg
            i += 1
        else:
            raise ValueError(f"Unexpected argument: {arg}")

    return options


def run_cli():
    """Run the processing steps headless and save the result."""
    from editing.session import EditingSession
    from models.errors import PixelForgeError
    from utils.image_io import load_image, save_image
    from utils.test_images import generate_noisy_sprite

    args = sys.argv[2:]

    if not args or args[0] == '--help':
        print_usage()
        sys.exit(0)

    try:
        options = parse_cli_args(args)
    except (ValueError, IndexError) as e:
        print(f"Error: {e}")
        print_usage()
        sys.exit(2)

    configure_logging(options['verbose'])

    if options['source'] in (None, '--synthetic'):
        print("Generating test image...")
        buffer = generate_noisy_sprite(256)
        name = "synthetic"
    else:
        print(f"Loading: {options['source']}")
        buffer = load_image(options['source'])
        name = options['source']

    session = EditingSession()
    try:
        buffer = session.load_image(buffer, name=name)
        print(f"Image: {buffer.width}x{buffer.height}, {buffer.distinct_colors()} colors")

        if options['align'] is not None:
            session.align(options['align'])
            report_step(session)
        if options['denoise'] is not None:
            session.denoise(*options['denoise'])
            report_step(session)
        if options['downsample'] is not None:
            session.downsample_by_block(options['downsample'])
            report_step(session)

        output = session.export(options['scale'])
    except PixelForgeError as e:
        print(f"Error: {e}")
        sys.exit(1)

    save_image(output, options['out'])
    print(f"\nSaved: {options['out']} ({output.width}x{output.height})")


def report_step(session):
    label = session.history.peek().label
    stats = session.last_stats
    print(f"\n=== {label} ===")
    print(f"Time:      {stats.elapsed_ms:.2f} ms")
    print(f"Colors:    {stats.colors_before} -> {stats.colors_after} ({stats.color_reduction_pct:.1f}% fewer)")
    print(f"Changed:   {stats.changed_pct:.1f}% of pixels")
    if stats.psnr is not None:
        print(f"PSNR:      {stats.psnr:.2f} dB")


def main():
    if len(sys.argv) > 1 and sys.argv[1] == '--cli':
        run_cli()
    else:
        configure_logging('--verbose' in sys.argv)
        run_gui()


if __name__ == '__main__':
    main()
