from evmabi.utils import checksum_encode


def test_keccak_sanity(keccak):
    # sanity check -- ensure keccak is keccak256, not sha3
    # https://ethereum.stackexchange.com/a/107985
    assert keccak(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_checksum_encode():
    # https://eips.ethereum.org/EIPS/eip-55
    for expected in [
        "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
        "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
        "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    ]:
        assert checksum_encode(bytes.fromhex(expected[2:])) == expected
