"""Generator — assembles a dungeon from catalog modules.

Submodules:
  models        Output dataclasses, search outcomes and errors.
  alignment     Rigid transform docking one connector onto another.
  overlap       Overlap oracle over a geometry adapter.
  frontier      Ordered set of open connectors.
  context       Search state with scoped, reversible mutations.
  placement     Placement trials and the viable-entry filter.
  heuristics    Connector and module selection policies.
  loops         Loop closure between two open connectors.
  engine        Backtracking search and the top-level driver.
  serialization JSON conversion (solution_to_dict, parse_solution).
  replay        Instantiate and re-verify a stored solution.
"""

from .models import Placement, Solution, PlacementFit, SearchOutcome, GenerationError
from .alignment import align_to_connector, ALIGN_MODES, FACE_TO_FACE, PASS_THROUGH
from .overlap import overlaps_existing, find_overlaps
from .frontier import Frontier, OpenConnector
from .context import SearchContext, LoopClosure
from .placement import find_placement, try_place, viable_entries
from .loops import find_loop_closure
from .engine import DungeonGenerator, generate_dungeon, expand, capture_solution
from .serialization import solution_to_dict, parse_solution
from .replay import instantiate_solution, verify_solution

__all__ = [
    # Models
    "Placement", "Solution", "PlacementFit", "SearchOutcome", "GenerationError",
    # Geometry
    "align_to_connector", "ALIGN_MODES", "FACE_TO_FACE", "PASS_THROUGH",
    "overlaps_existing", "find_overlaps",
    # Search
    "Frontier", "OpenConnector", "SearchContext", "LoopClosure",
    "find_placement", "try_place", "viable_entries", "find_loop_closure",
    "DungeonGenerator", "generate_dungeon", "expand", "capture_solution",
    # Serialization
    "solution_to_dict", "parse_solution",
    "instantiate_solution", "verify_solution",
]
