import unittest
from datetime import date, datetime, timezone

from escola.core import datas
from escola.core.constants import FUSO_HORARIO


class TestDatas(unittest.TestCase):

    def test_mes_referencia(self):
        self.assertEqual(datas.mes_referencia(datetime(2025, 8, 20, tzinfo=FUSO_HORARIO)), "2025-08")

    def test_proximo_mes_virada_de_ano(self):
        proximo = datas.proximo_mes(datetime(2025, 12, 15, tzinfo=FUSO_HORARIO))
        self.assertEqual((proximo.year, proximo.month, proximo.day), (2026, 1, 1))
        self.assertEqual(datas.mes_referencia(proximo), "2026-01")

    def test_proximo_mes_comum(self):
        proximo = datas.proximo_mes(datetime(2025, 1, 31, tzinfo=FUSO_HORARIO))
        self.assertEqual(datas.mes_referencia(proximo), "2025-02")

    def test_data_vencimento_dia_5_no_fuso(self):
        vencimento = datas.data_vencimento(datetime(2025, 9, 1, tzinfo=FUSO_HORARIO))
        self.assertEqual(vencimento, datetime(2025, 9, 5, tzinfo=FUSO_HORARIO))
        self.assertEqual(vencimento.utcoffset().total_seconds(), -3 * 3600)

    def test_id_dia(self):
        self.assertEqual(datas.id_dia(datetime(2025, 8, 9, 14, 30, tzinfo=FUSO_HORARIO)), "09-08-2025")

    def test_para_data(self):
        self.assertEqual(datas.para_data("2007-08-20T00:00:00.000Z"), date(2007, 8, 20))
        self.assertEqual(datas.para_data("2007-08-20"), date(2007, 8, 20))
        self.assertEqual(datas.para_data(datetime(2007, 8, 20, tzinfo=timezone.utc)), date(2007, 8, 20))
        self.assertEqual(datas.para_data(date(2007, 8, 20)), date(2007, 8, 20))
        self.assertIsNone(datas.para_data(None))
        self.assertIsNone(datas.para_data(''))

    def test_idade_no_dia_do_aniversario(self):
        # 18 anos completos hoje: já é maior de idade
        self.assertEqual(datas.calcular_idade(date(2007, 8, 20), date(2025, 8, 20)), 18)

    def test_idade_na_vespera_do_aniversario(self):
        # 17 anos e 364 dias
        self.assertEqual(datas.calcular_idade(date(2007, 8, 21), date(2025, 8, 20)), 17)

    def test_idade_aniversario_em_29_de_fevereiro(self):
        self.assertEqual(datas.calcular_idade(date(2008, 2, 29), date(2026, 2, 28)), 17)
        self.assertEqual(datas.calcular_idade(date(2008, 2, 29), date(2026, 3, 1)), 18)


if __name__ == '__main__':
    unittest.main()
