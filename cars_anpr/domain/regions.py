# Administrative region codes that may appear at the end of a plate.
# Two- and three-digit codes share one set; leading zeros are not significant.
REGION_CODES = frozenset({
    1, 2, 102, 702, 3, 4, 5, 6, 7, 8, 9, 10,
    11, 12, 13, 113, 14, 15, 16, 116, 716, 17, 18, 19,
    21, 121, 22, 23, 93, 123, 193, 24, 124, 25, 125, 26,
    126, 27, 28, 29, 30, 31, 32, 33, 34, 134, 35, 36,
    136, 37, 38, 138, 39, 40, 41, 42, 142, 43, 44, 45,
    46, 47, 147, 48, 49, 50, 90, 150, 190, 750, 790, 51,
    52, 152, 252, 53, 54, 154, 55, 155, 56, 156, 57, 58,
    59, 159, 60, 61, 161, 761, 62, 63, 163, 763, 64, 164,
    65, 66, 96, 196, 67, 68, 69, 70, 71, 72, 73, 173, 74,
    174, 75, 76, 77, 97, 99, 177, 197, 199, 777, 797, 799, 977,
    78, 98, 178, 198, 79, 80, 81, 82, 83, 84, 85, 86, 186,
    87, 88, 94, 89, 92, 95,
})

# Letters that look the same in Cyrillic and Latin, plus digits.
PLATE_ALPHABET = "ABEKMHOPCTYX0123456789"
