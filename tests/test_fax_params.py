from pikepdf import Dictionary, Name

from pdf_raster.models.raster import FaxDecodeParameters
from pdf_raster.utils.fax_params import parse_fax_parameters


def test_missing_dictionary_uses_defaults():
    params = parse_fax_parameters(None)
    assert params == FaxDecodeParameters()
    assert params.k == 0
    assert params.columns == 1728
    assert params.end_of_block is True
    assert params.black_is_1 is False


def test_explicit_values():
    params = parse_fax_parameters(Dictionary(
        K=-1,
        Columns=2480,
        Rows=3508,
        BlackIs1=True,
        EncodedByteAlign=True,
        EndOfLine=True,
        EndOfBlock=False,
        DamagedRowsBeforeError=3,
    ))
    assert params == FaxDecodeParameters(
        k=-1,
        end_of_line=True,
        encoded_byte_align=True,
        columns=2480,
        rows=3508,
        end_of_block=False,
        black_is_1=True,
        damaged_rows_before_error=3,
    )


def test_absent_keys_keep_defaults():
    params = parse_fax_parameters(Dictionary(K=-1))
    assert params.k == -1
    assert params.columns == 1728
    assert params.black_is_1 is False


def test_wrong_types_keep_defaults():
    params = parse_fax_parameters(Dictionary(Columns=Name.Wide, BlackIs1=1))
    assert params.columns == 1728
    assert params.black_is_1 is False
