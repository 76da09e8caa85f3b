"""
Post-lowering validation: no arrow function may survive ArrowFunctionLoweringPass.
"""

import logging

from ..shared.ast_visitor import iter_nodes
from ..shared.errors import ErrorCode, UnarrowImplementationError
from ..shared.nodes import Program, is_arrow_function
from .arrow_lowering import ArrowFunctionLoweringPass
from .base import BasePass, TransformContext

logger = logging.getLogger("unarrow.passes.validation")


class ArrowFreeValidationPass(BasePass):
    requires = [ArrowFunctionLoweringPass]

    def run(self, program: Program, ctx: TransformContext) -> Program:
        for node in iter_nodes(program):
            if is_arrow_function(node):
                raise UnarrowImplementationError(
                    f"arrow function at {node.location or '<unknown location>'} survived lowering",
                    error_code=ErrorCode.ARROW_SURVIVED_LOWERING.value,
                )
        logger.debug("Validation: tree is arrow-free")
        return program
