# PlotSession.py
"""
The set of formulas currently on the graph.

A PlotSession is created by the UI and passed to every add/remove/render
call; there is no module-level formula list. Sampled curves are cached per
formula id and dropped when that formula goes away.
"""

import itertools
import logging
from dataclasses import dataclass

from . import FormulaEngine
from . import CurveEngine
from . import IntersectionEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Formula:
    """A compiled formula as registered in a session. Immutable."""
    id: int
    text: str
    color: str
    function: object


class PlotSession:

    def __init__(self, plot_step=CurveEngine.PLOT_STEP, scan_options=None):
        self.plot_step = plot_step
        self.scan_options = dict(scan_options or {})
        self._formulas = []
        self._ids = itertools.count(1)
        self._curve_cache = {}
        self._cache_key = None

    @property
    def formulas(self):
        return tuple(self._formulas)

    def __len__(self):
        return len(self._formulas)

    def __iter__(self):
        return iter(self.formulas)

    def add(self, text, color):
        """Compile and register a formula.

        Raises InvalidFormulaError before anything is stored.
        """
        function = FormulaEngine.compile_formula(text)
        formula = Formula(next(self._ids), text, color, function)
        self._formulas.append(formula)
        logger.info("Added formula %d: %s", formula.id, text)
        return formula

    def remove(self, formula_id):
        """Remove a formula by id; return it, or None if the id is unknown."""
        for formula in self._formulas:
            if formula.id == formula_id:
                self._formulas.remove(formula)
                self._curve_cache.pop(formula_id, None)
                logger.info("Removed formula %d: %s", formula_id, formula.text)
                return formula

        logger.debug("No formula with id %s to remove", formula_id)
        return None

    def get(self, formula_id):
        for formula in self._formulas:
            if formula.id == formula_id:
                return formula
        return None

    def clear(self):
        self._formulas.clear()
        self._curve_cache.clear()

    def curve(self, formula, mapper, width):
        """Screen-space segments of one formula, sampled once per mapper/width."""
        cache_key = (mapper, width, self.plot_step)
        if cache_key != self._cache_key:
            self._curve_cache.clear()
            self._cache_key = cache_key

        if formula.id not in self._curve_cache:
            self._curve_cache[formula.id] = CurveEngine.sample_curve(
                formula.function, mapper, step=self.plot_step, width=width)
        return self._curve_cache[formula.id]

    def intersections(self):
        """Intersection points across every pair of registered formulas."""
        return IntersectionEngine.find_all_intersections(
            [formula.function for formula in self._formulas], **self.scan_options)
