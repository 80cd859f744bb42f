import time

from octet import Machine, MachineConfig

# Draws the hex digits 0-7 in a row, then spins on a jump-to-self.
ROM = bytes([
    0x60, 0x00,  # 200: V0 = 0      digit
    0x61, 0x01,  # 202: V1 = 1      x
    0x62, 0x01,  # 204: V2 = 1      y
    0xF0, 0x29,  # 206: I = font(V0)
    0xD1, 0x25,  # 208: draw 5 rows at (V1, V2)
    0x70, 0x01,  # 20A: V0 += 1
    0x71, 0x06,  # 20C: V1 += 6
    0x30, 0x08,  # 20E: skip if V0 == 8
    0x12, 0x06,  # 210: jump 206
    0x12, 0x12,  # 212: jump 212
])


def print_frame(frame):
    for row in frame.to_numpy()[:8]:
        print("".join("#" if pixel else "." for pixel in row))


if __name__ == "__main__":
    machine = Machine(MachineConfig(log_level="INFO"))
    machine.load_program(ROM, source="digits")

    start = time.time()
    frame = machine.run(64)
    print("Execution time (s):", time.time() - start)

    print_frame(frame)
