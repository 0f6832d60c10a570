import pytest

from gtrends import reference


class TestReferenceTables:
    def test_namibia_is_not_missing(self):
        assert "NA" in reference.geo_codes()

    def test_subdivisions_included(self):
        codes = reference.geo_codes()
        assert {"US", "US-CA", "CA-ON", "GB-SCT"} <= codes
        assert "" not in codes

    def test_category_ids_are_ints(self):
        ids = reference.category_ids()
        assert 0 in ids
        assert 20 in ids
        assert 99999 not in ids

    def test_language_codes(self):
        assert {"en-US", "fr", "de"} <= reference.language_codes()

    def test_accessors_return_copies(self):
        df = reference.countries()
        df.loc[0, "name"] = "changed"
        assert reference.countries().loc[0, "name"] != "changed"

    def test_category_columns(self):
        assert list(reference.categories().columns) == ["id", "name", "parent_id"]

    @pytest.mark.parametrize("code", [
        "JP-14", "JP-47", "SE-AB", "RU-MOW", "MX-BCN", "BR-SP", "ZA-GP",
        "NG-LA", "CN-BJ", "KR-11",
    ])
    def test_subdivisions_cover_all_countries(self, code):
        assert code in reference.geo_codes()

    def test_every_subdivision_belongs_to_its_country(self):
        df = reference.countries()
        subs = df[df["sub_code"] != ""]
        assert len(subs) > 4000
        assert (subs["sub_code"].str.split("-").str[0]
                == subs["country_code"]).all()
        assert set(subs["country_code"]) <= set(df.loc[df["sub_code"] == "",
                                                        "country_code"])

    @pytest.mark.parametrize("category_id", [1086, 269, 1114, 259, 1001])
    def test_nested_categories_included(self, category_id):
        assert category_id in reference.category_ids()

    def test_every_parent_is_a_known_category(self):
        df = reference.categories()
        parents = {int(p) for p in df["parent_id"] if p != ""}
        assert parents <= reference.category_ids()
        assert len(reference.category_ids()) > 800
