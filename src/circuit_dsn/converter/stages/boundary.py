"""Board layer stack and outline derivation."""

from __future__ import annotations

import logging

from ...dsn.model import DsnBoundary, DsnLayer, DsnPath, DsnStructure
from ...errors import ConfigurationError, OrderingError
from ...geometry.transform import AffineTransform
from ...records.models import PcbBoard
from ...records.store import CircuitRecordStore
from ..stage import ConverterStage

logger = logging.getLogger(__name__)

DEFAULT_LAYER_COUNT = 2
DEFAULT_BOARD_SIZE_MM = 100.0
BOUNDARY_LAYER = "pcb"


def generate_layers(num_layers: int) -> list[DsnLayer]:
    """Build the copper stack using KiCad layer names.

    ``F.Cu`` is index 0, inner layers are ``In1.Cu`` .. ``In<n-2>.Cu`` and
    ``B.Cu`` takes the last index.

    Raises:
        ConfigurationError: If fewer than two layers are requested.
    """
    if num_layers < 2:
        raise ConfigurationError(f"PCB must have at least 2 layers, got {num_layers}")
    layers = [DsnLayer(layer_name="F.Cu", index=0)]
    layers.extend(DsnLayer(layer_name=f"In{n}.Cu", index=n) for n in range(1, num_layers - 1))
    layers.append(DsnLayer(layer_name="B.Cu", index=num_layers - 1))
    return layers


def board_boundary(board: PcbBoard | None, transform: AffineTransform) -> DsnBoundary:
    """Closed rectangular outline of the board in output coordinates.

    Corners run top-left, top-right, bottom-right, bottom-left and back to
    top-left, giving ten coordinates. A missing board, size or center falls
    back to a 100 mm square centered on the origin.
    """
    width = board.width if board is not None and board.width is not None else DEFAULT_BOARD_SIZE_MM
    height = board.height if board is not None and board.height is not None else DEFAULT_BOARD_SIZE_MM
    center_x = board.center.x if board is not None and board.center is not None else 0.0
    center_y = board.center.y if board is not None and board.center is not None else 0.0

    half_width = width / 2
    half_height = height / 2
    corners = [
        (center_x - half_width, center_y - half_height),
        (center_x + half_width, center_y - half_height),
        (center_x + half_width, center_y + half_height),
        (center_x - half_width, center_y + half_height),
        (center_x - half_width, center_y - half_height),
    ]
    path = DsnPath(layer=BOUNDARY_LAYER, width=0, coordinates=transform.flat_coordinates(corners))
    return DsnBoundary(paths=[path])


def first_board(store: CircuitRecordStore) -> PcbBoard | None:
    """Only the first board record is honored."""
    boards = store.pcb_board.list()
    return boards[0] if boards else None


class BoardBoundaryStage(ConverterStage):
    """Write the layer stack and board outline, nothing else."""

    def _structure(self) -> DsnStructure:
        document = self.ctx.require_document(self.name)
        if document.structure is None:
            raise OrderingError(f"{self.name} requires an initialized structure section")
        return document.structure

    def _write_layers_and_boundary(self, structure: DsnStructure) -> None:
        transform = self.ctx.require_transform(self.name)
        board = first_board(self.ctx.store)
        num_layers = board.num_layers if board is not None and board.num_layers is not None else DEFAULT_LAYER_COUNT
        structure.layers = generate_layers(num_layers)
        structure.boundary = board_boundary(board, transform)
        logger.debug("%s: wrote %d layers and board outline", self.name, len(structure.layers))

    def _step(self) -> None:
        self._write_layers_and_boundary(self._structure())
        self.finished = True
