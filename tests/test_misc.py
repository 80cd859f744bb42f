"""Tests for miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
import pytest
from octet import execute, Status, FONT_START
from octet.constants import FONT_DATA


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32
        assert state.delay_timer == 48

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        """Test BCD conversion with 157."""
        state = execute(fresh_state, 0x609D)  # V0 = 157
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)

        assert state.memory[0x300] == 1  # Hundreds
        assert state.memory[0x301] == 5  # Tens
        assert state.memory[0x302] == 7  # Ones
        assert state.I == 0x300

    @pytest.mark.parametrize("value, digits", [(0, (0, 0, 0)), (255, (2, 5, 5)), (9, (0, 0, 9)), (40, (0, 4, 0))])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        state = execute(fresh_state, 0x6000 | value)
        state = execute(state, 0xA400)
        state = execute(state, 0xF033)

        assert tuple(int(d) for d in state.memory[0x400:0x403]) == digits

    def test_bcd_wraps_and_spares_font(self, fresh_state):
        """Writes wrap at 0xFFF; the ones landing on the font are dropped."""
        state = execute(fresh_state, 0x60FF)
        state = execute(state, 0xAFFF)
        state = execute(state, 0xF033)

        assert state.memory[0xFFF] == 2
        assert jnp.array_equal(state.memory[:len(FONT_DATA)], FONT_DATA)


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """Test font addressing for all hex digits."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            expected = FONT_START + digit * 5
            assert state.I == expected, f"Font address wrong for digit {digit:X}"

    def test_font_loaded_at_start_of_memory(self, fresh_state):
        assert jnp.array_equal(fresh_state.memory[0:80], FONT_DATA)
        assert fresh_state.memory[0] == 0xF0
        assert fresh_state.memory[79] == 0x80


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_increments_index(self, fresh_state):
        """FX55 - Store V0..VX at I, then I += X + 1."""
        state = execute(fresh_state, 0x6001)
        state = execute(state, 0x6102)
        state = execute(state, 0x6203)
        state = execute(state, 0x63FF)  # Not stored
        state = execute(state, 0xA400)

        state = execute(state, 0xF255)

        assert [int(b) for b in state.memory[0x400:0x404]] == [1, 2, 3, 0]
        assert state.I == 0x403

    def test_load_increments_index(self, fresh_state):
        """FX65 - Load V0..VX from I, then I += X + 1."""
        state = fresh_state.replace(
            memory=fresh_state.memory.at[0x400:0x403].set(jnp.array([7, 8, 9], dtype=jnp.uint8))
        )
        state = state.replace(V=state.V.at[2].set(0x55))
        state = execute(state, 0xA400)

        state = execute(state, 0xF165)

        assert state.V[0] == 7
        assert state.V[1] == 8
        assert state.V[2] == 0x55  # Beyond X
        assert state.I == 0x402

    def test_store_load_round_trip(self, fresh_state):
        """FX55 then FX65 from the same I restores V0..VX."""
        state = fresh_state
        values = [0x11, 0x22, 0x33, 0x44, 0x55, 0x66]
        for i, value in enumerate(values):
            state = execute(state, 0x6000 | (i << 8) | value)
        state = execute(state, 0xA500)
        state = execute(state, 0xF555)

        for i in range(len(values)):
            state = execute(state, 0x6000 | (i << 8))
        state = execute(state, 0xA500)
        state = execute(state, 0xF565)

        assert [int(v) for v in state.V[:6]] == values

    def test_store_load_fixed_index(self, fixed_index_state):
        """With memory_increments_index off, I is unchanged."""
        state = execute(fixed_index_state, 0x6001)
        state = execute(state, 0x6102)
        state = execute(state, 0xA300)

        state = execute(state, 0xF155)
        assert state.I == 0x300

        state = execute(state, 0x6000)
        state = execute(state, 0x6100)
        state = execute(state, 0xF165)
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.I == 0x300

    def test_store_does_not_overwrite_font(self, fresh_state):
        state = execute(fresh_state, 0x60AA)
        state = execute(state, 0xA010)

        state = execute(state, 0xF055)

        assert jnp.array_equal(state.memory[:len(FONT_DATA)], FONT_DATA)
        assert state.I == 0x011


class TestIndexArithmetic:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF01E)  # I += V0

        assert state.I == 0x310
        assert state.V[15] == 0

    def test_add_to_index_no_flag(self, fresh_state):
        """FX1E - Crossing 0xFFF neither wraps nor sets VF."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xAF80)  # I = 0xF80
        state = execute(state, 0xF01E)

        assert state.I == 0x107F
        assert state.V[15] == 0

    def test_add_to_index_wraps_at_16_bits(self, fresh_state):
        state = fresh_state.replace(I=jnp.astype(0xFFF0, jnp.uint16))
        state = execute(state, 0x6020)
        state = execute(state, 0xF01E)

        assert state.I == 0x0010


class TestWaitForKey:
    """Test FX0A."""

    def test_wait_for_key_blocking(self, fresh_state):
        """Without a key the PC rewinds onto FX0A and the machine waits."""
        initial_pc = fresh_state.pc

        state = execute(fresh_state, 0xF30A)

        assert state.pc == initial_pc - 2
        assert int(state.status) == Status.AWAITING_KEY
        assert state.key_register == 3

    def test_wait_for_key_pressed(self, fresh_state):
        """With a key held, its index goes into VX and execution continues."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[7].set(True))
        initial_pc = state.pc

        state = execute(state, 0xF00A)

        assert state.V[0] == 7
        assert state.pc == initial_pc
        assert int(state.status) == Status.RUNNING

    def test_wait_for_key_lowest_index(self, fresh_state):
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0xC].set(True).at[4].set(True))

        state = execute(state, 0xF50A)

        assert state.V[5] == 4
