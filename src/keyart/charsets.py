# Printable keys: U+0021 to U+007E (every visible ASCII character, no space)
PRINTABLE_KEYS = "".join(chr(i) for i in range(0x21, 0x7F))

# Keys of the shipped table; the trailing space is the blank entry
DEFAULT_KEYS = PRINTABLE_KEYS + " "

# Measured with RobotoMono-Regular at scale 30, one value per DEFAULT_KEYS entry
DEFAULT_BRIGHTNESSES = (
    22, 25, 59, 55, 48, 65, 13, 27, 28, 41, 34, 8, 15, 5, 23, 64, 33, 50, 50, 53, 53, 53, 38, 61,
    55, 11, 13, 29, 33, 29, 34, 61, 53, 71, 46, 62, 56, 46, 57, 58, 48, 36, 60, 36, 75, 73, 56, 53,
    57, 64, 55, 38, 52, 48, 79, 54, 41, 51, 35, 23, 35, 32, 12, 10, 49, 56, 37, 56, 47, 43, 54, 52,
    39, 34, 53, 44, 61, 44, 43, 47, 48, 28, 42, 37, 42, 34, 52, 40, 38, 43, 32, 23, 32, 24, 0,
)
