import asyncio
import sys

from hostquery import HostAddressQuery, HostAddressQueryDelegate, HostQueryError
from hostquery.config import configure_logging, load_config


class Printer(HostAddressQueryDelegate):
    """Prints each query's outcome and stops the loop once all have reported."""

    def __init__(self, loop, count):
        self.loop = loop
        self.remaining = count

    def _done(self):
        self.remaining -= 1
        if self.remaining == 0:
            self.loop.stop()

    def on_success(self, query, addresses):
        for record in addresses:
            print(f"{query.name}\t{record.sockaddr[0]}")
        self._done()

    def on_failure(self, query, error):
        print(f"{query.name}\terror: {error}", file=sys.stderr)
        self._done()


if __name__ == "__main__":
    config = load_config(".env")
    configure_logging(config.log_level)
    names = sys.argv[1:] or ["localhost"]

    loop = asyncio.new_event_loop()
    printer = Printer(loop, len(names))
    queries = []
    for name in names:
        query = HostAddressQuery(name)
        query.delegate = printer
        try:
            query.start(loop)
        except HostQueryError as exc:
            printer.on_failure(query, exc)
        queries.append(query)
    loop.run_forever()
    loop.close()
