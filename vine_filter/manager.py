from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
import logging
import os
import jsonpickle
import srsly
from thinc.api import Config
from tqdm import tqdm
from wasabi import Printer  # type: ignore[import]
from .errors import (
    DuplicateFilterError,
    FilterDefinitionError,
    NoFilterError,
)
from .filtering import Filter, FilterFactory
from .vine import Vine
from .consoles import VineFilterConsoles

logger = logging.getLogger(__name__)

absolute_config_filename = os.sep.join(
    (os.path.dirname(os.path.realpath(__file__)), "config.cfg")
)
config = Config().from_disk(absolute_config_filename)


class Manager:
    """The facade class for the vine filter library.

    Parameters:

    modifier_relations -- the relations that attach a modifier word to the root word of a
        target phrase, e.g. *green* to *pepper* in *green bell pepper*. Defaults to the value in
        *config.cfg* (*amod* and *nn*).
    number_of_workers -- the number of threads used by *filter_vines()*. Defaults to the value
        in *config.cfg*.
    verbose -- a boolean value specifying whether progress should be outputted to the console.
        Defaults to the value in *config.cfg*.
    """

    def __init__(
        self,
        *,
        modifier_relations: Optional[Sequence[str]] = None,
        number_of_workers: Optional[int] = None,
        verbose: Optional[bool] = None
    ):
        if modifier_relations is None:
            modifier_relations = config["matching"]["modifier_relations"]
        if number_of_workers is None:
            number_of_workers = config["manager"]["number_of_workers"]
        elif number_of_workers <= 0:
            raise ValueError("number_of_workers must be a positive integer.")
        if verbose is None:
            verbose = config["manager"]["verbose"]
        self.modifier_relations = list(modifier_relations)
        self.number_of_workers = number_of_workers
        self.verbose = verbose
        self.filter_factory = FilterFactory(self.modifier_relations)
        self.filters: List[Filter] = []
        self.lock = Lock()

    def register_filter(self, filter_to_register: Filter) -> None:
        self.register_filters([filter_to_register])

    def register_filters(self, filters_to_register: Sequence[Filter]) -> None:
        """Registers *filters_to_register* together. If any name is already registered or
        occurs twice among *filters_to_register*, none of them is registered."""
        with self.lock:
            names = set(registered_filter.name for registered_filter in self.filters)
            for filter_to_register in filters_to_register:
                if filter_to_register.name in names:
                    raise DuplicateFilterError(filter_to_register.name)
                names.add(filter_to_register.name)
            self.filters.extend(filters_to_register)

    def register_filters_from_config(
        self, filter_config: Union[Mapping[str, Any], str, "os.PathLike[str]"]
    ) -> List[str]:
        """Registers the filters defined in the *[filters]* section of a configuration.

        Parameters:

        filter_config -- a *thinc* *Config* object, a dictionary with the same structure, or the
            path of a configuration file.

        Returns the names of the newly registered filters.
        """
        if isinstance(filter_config, (str, os.PathLike)):
            filter_config = Config().from_disk(filter_config)
        if "filters" not in filter_config:
            raise FilterDefinitionError("Configuration has no [filters] section")
        filters = self.filter_factory.filters(filter_config["filters"])
        self.register_filters(filters)
        return [filter_to_register.name for filter_to_register in filters]

    def remove_filter(self, name: str) -> None:
        with self.lock:
            self.filters = [
                registered_filter
                for registered_filter in self.filters
                if registered_filter.name != name
            ]

    def remove_all_filters(self) -> None:
        with self.lock:
            self.filters = []

    def list_filter_names(self) -> List[str]:
        with self.lock:
            return sorted(registered_filter.name for registered_filter in self.filters)

    def parse_vine(self, document: Mapping[str, Any]) -> Optional[Vine]:
        """Returns a *Vine* built from *document*, or *None* if *document* is not a valid
        vine."""
        return Vine.from_document(document)

    def read_vines(self, path: Union[str, "os.PathLike[str]"]) -> List[Vine]:
        """Reads vine documents from a JSON Lines file (suffix *.jsonl*) or from a file holding
        a JSON array. Documents that do not describe a valid vine are skipped."""
        if str(path).endswith(".jsonl"):
            documents: Iterable[Any] = srsly.read_jsonl(path)
        else:
            documents = srsly.read_json(path)
            if isinstance(documents, dict):
                documents = [documents]
        vines = []
        number_of_documents = 0
        for document in documents:
            number_of_documents += 1
            vine = self.parse_vine(document)
            if vine is not None:
                vines.append(vine)
        if len(vines) < number_of_documents:
            logger.info(
                "Skipped %d of %d documents in %s",
                number_of_documents - len(vines),
                number_of_documents,
                path,
            )
        return vines

    def write_vines(
        self, path: Union[str, "os.PathLike[str]"], vines: Iterable[Vine]
    ) -> None:
        """Writes *vines*, including their matched filter names, to a JSON Lines file."""
        srsly.write_jsonl(path, (vine.to_document() for vine in vines))

    def evaluate(self, vine: Vine) -> List[str]:
        """Evaluates every registered filter against *vine*, records the filters it passes on
        the vine and returns their names."""
        return self._evaluate_with(self._get_filters(), vine)

    def filter_vines(self, vines: Iterable[Vine]) -> List[Vine]:
        """Evaluates every registered filter against each of *vines* and returns the vines
        that passed at least one filter, in their original order. The filters registered when
        the call starts are used for every vine."""
        vines = list(vines)
        filters = self._get_filters()
        if self.number_of_workers > 1:
            with ThreadPoolExecutor(max_workers=self.number_of_workers) as executor:
                results = list(
                    tqdm(
                        executor.map(
                            lambda vine: self._evaluate_with(filters, vine), vines
                        ),
                        total=len(vines),
                        disable=not self.verbose,
                    )
                )
        else:
            results = [
                self._evaluate_with(filters, vine)
                for vine in tqdm(vines, disable=not self.verbose)
            ]
        good_vines = [vine for vine, result in zip(vines, results) if len(result) > 0]
        if self.verbose:
            msg = Printer()
            msg.good(
                " ".join(
                    (str(len(good_vines)), "of", str(len(vines)), "vines passed a filter")
                )
            )
        return good_vines

    def _get_filters(self) -> List[Filter]:
        with self.lock:
            filters = list(self.filters)
        if len(filters) == 0:
            raise NoFilterError("No filters registered.")
        return filters

    @staticmethod
    def _evaluate_with(filters: Sequence[Filter], vine: Vine) -> List[str]:
        return [
            registered_filter.name
            for registered_filter in filters
            if registered_filter.evaluate(vine)
        ]

    def serialize_filters(self) -> str:
        """Returns the registered filters in a form that *deserialize_filters()* accepts."""
        with self.lock:
            return jsonpickle.encode(self.filters)

    def deserialize_filters(self, serialized_filters: str) -> None:
        """Replaces the registered filters with filters serialized by *serialize_filters()*.

        *jsonpickle* reconstructs whatever objects *serialized_filters* describes before they
        are checked, so *serialized_filters* must be the output of *serialize_filters()* read
        from a trusted source.
        """
        filters = jsonpickle.decode(serialized_filters)
        if not isinstance(filters, list) or not all(
            isinstance(deserialized_filter, Filter) for deserialized_filter in filters
        ):
            raise FilterDefinitionError("Serialized data does not describe a list of filters")
        with self.lock:
            self.filters = filters

    def start_console(self) -> None:
        """Starts a console that evaluates vine documents entered as JSON, one per line."""
        VineFilterConsoles(self).start_filter_mode()
