"""Allow running hashagram with `python -m hashagram`."""

from hashagram import main

main()
