import srsly
from wasabi import Printer  # type: ignore[import]
from .about import __version__
from .errors import NoFilterError


class VineFilterConsoles:
    """Manages the consoles."""

    def __init__(self, manager):
        self.manager = manager

    def common(self):
        """Contains functionality common to all consoles."""
        print("Vine filter version", __version__)
        print("Modifier relations are", ", ".join(self.manager.modifier_relations))
        print()

    def print_filter_info(self):
        filter_names = self.manager.list_filter_names()
        if len(filter_names) == 0:
            raise NoFilterError("No filters registered.")
        filter_names_string = "; ".join("".join(("'", name, "'")) for name in filter_names)
        print(": ".join(("Filters", filter_names_string)))

    def start_filter_mode(self):
        """Starts a console that evaluates the registered filters against vine documents entered
        by the user as JSON objects, one per line. Entering *exit* or end of input closes the
        console.
        """
        self.common()
        self.print_filter_info()
        print()
        print("Filter mode")
        print()
        msg = Printer()
        while True:
            try:
                entry = input()
            except EOFError:
                break
            entry = entry.strip()
            if entry == "exit":
                break
            if len(entry) == 0:
                continue
            try:
                document = srsly.json_loads(entry)
            except ValueError:
                msg.fail("Entry is not valid JSON.")
                continue
            vine = self.manager.parse_vine(document)
            if vine is None:
                msg.fail("Entry is not a valid vine.")
                continue
            filter_names = self.manager.evaluate(vine)
            if len(filter_names) == 0:
                print("".join(("Vine '", vine.id, "' passed no filters.")))
            else:
                print(
                    "".join(
                        (
                            "Vine '",
                            vine.id,
                            "' passed: ",
                            "; ".join(filter_names),
                        )
                    )
                )
