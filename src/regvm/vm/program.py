"""Compiled VM program."""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from regvm.exceptions import CompileError
from regvm.vm.inst import Inst, OpCode


@dataclass(frozen=True)
class Program:
    """An address-resolved instruction sequence.

    Programs are immutable once built and can be shared by any number of
    searches.

    Attributes:
        instructions: The instructions, with absolute jump targets.
        num_groups: Number of capturing groups in the source pattern.
        source: The pattern the program was compiled from, if known.
    """

    instructions: Tuple[Inst, ...]
    num_groups: int = 0
    source: str = ""

    def __len__(self) -> int:
        return len(self.instructions)

    def __getitem__(self, index: int) -> Inst:
        return self.instructions[index]

    def __iter__(self) -> Iterator[Inst]:
        return iter(self.instructions)

    def validate(self) -> None:
        """Check that the program is well formed.

        Raises:
            CompileError: If a target is out of range or the program does
                not end with FINISH.
        """
        if not self.instructions or self.instructions[-1].op != OpCode.FINISH:
            raise CompileError("program must end with a Finish instruction")
        size = len(self.instructions)
        for index, inst in enumerate(self.instructions):
            for target in inst.targets:
                if not 0 <= target < size:
                    raise CompileError(
                        f"instruction {index:02} ({inst}) targets {target}, "
                        f"outside the program of {size} instructions"
                    )

    def disassemble(self) -> List[str]:
        """Return one ``index: instruction`` line per instruction."""
        return [f"{index:02}: {inst}" for index, inst in enumerate(self.instructions)]

    def __str__(self) -> str:
        return "\n".join(self.disassemble())
